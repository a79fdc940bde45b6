"""Release policies applied to the aggregate change level.

- Required files: a release at or above the enforcement level must touch
  every required file.
- Threshold: a release below the check level is reported as ``none``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nextsv.exceptions import MissingRequiredFilesError

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable

    from nextsv.core.level import ChangeLevel

logger = logging.getLogger(__name__)


def missing_required_files(
    required: Iterable[str],
    changed: Collection[str],
    known: Collection[str] | None = None,
) -> list[str]:
    """Required files that were not changed, sorted.

    Args:
        required: Repository-relative paths that must change
        changed: Paths changed by the commits in scope
        known: Paths tracked by the repository. When given, required files
            missing from the repository are skipped with a warning.
    """
    missing = []
    for path in sorted(set(required)):
        if path in changed:
            continue
        if known is not None and path not in known:
            logger.warning("Required file %s is not in the repository", path)
            continue
        missing.append(path)
    return missing


def enforce_required_files(
    level: ChangeLevel,
    enforce_level: ChangeLevel,
    required: Iterable[str],
    changed: Collection[str],
    known: Collection[str] | None = None,
) -> None:
    """Veto the release if required files were not changed.

    Enforcement only applies when ``level >= enforce_level``.

    Raises:
        MissingRequiredFilesError: Listing every missing file
    """
    required = list(required)
    if not required:
        return

    if level < enforce_level:
        logger.debug("Change level %s is below enforcement level %s", level, enforce_level)
        return

    missing = missing_required_files(required, changed, known)
    if missing:
        raise MissingRequiredFilesError(missing, level=level)
    logger.debug("All required files are present")


def meets_threshold(level: ChangeLevel, check_level: ChangeLevel | None) -> bool:
    """Whether the level reaches the minimum set for reporting a release."""
    if check_level is None:
        return True
    if level < check_level:
        logger.info(
            "The highest level change `%s` does not reach the threshold `%s`", level, check_level
        )
        return False
    return True
