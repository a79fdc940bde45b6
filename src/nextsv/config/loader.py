"""Configuration loading from pyproject.toml."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from nextsv.config.models import NextsvConfig
from nextsv.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

TOOL_KEY = "nextsv"


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find pyproject.toml in the start directory or its parents.

    Args:
        start: Directory to search from (defaults to the working directory)

    Raises:
        ConfigNotFoundError: If no pyproject.toml is found
    """
    start = (start or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    raise ConfigNotFoundError(f"No pyproject.toml found in {start} or its parents")


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Read and parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigNotFoundError(f"Configuration file not found: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_nextsv_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.nextsv]`` table, or an empty dict."""
    return dict(pyproject.get("tool", {}).get(TOOL_KEY, {}))


def load_config(
    path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> NextsvConfig:
    """Load configuration and apply overrides.

    A missing pyproject.toml, or one without a ``[tool.nextsv]`` table,
    yields the defaults.

    Args:
        path: Project directory (or pyproject.toml file) to load from
        overrides: Values taking precedence over the file, typically
            command line options. ``None`` values are ignored.

    Raises:
        ConfigValidationError: If the resulting configuration is invalid
    """
    data: dict[str, Any] = {}
    try:
        pyproject_path = path if path is not None and path.is_file() else find_pyproject_toml(path)
    except ConfigNotFoundError:
        logger.debug("No pyproject.toml found, using default configuration")
    else:
        data = extract_nextsv_config(load_pyproject_toml(pyproject_path))
        logger.debug("Loaded configuration from %s: %s", pyproject_path, data)

    if overrides:
        data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return NextsvConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid nextsv configuration: {e}") from e
