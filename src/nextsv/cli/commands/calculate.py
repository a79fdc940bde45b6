"""Implementation of the calculate command.

The calculate command reports the bump and/or the next version number for
the repository, and maps failures onto stable exit codes.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

from nextsv.config import load_config
from nextsv.core.calculator import calculate_from_repo
from nextsv.exceptions import (
    ConfigError,
    GitError,
    InvalidForceTransitionError,
    MissingRequiredFilesError,
    NextsvError,
    NoCommitsFoundError,
    NoVersionTagError,
    TagParseError,
)
from nextsv.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from nextsv.core.calculator import Calculation

logger = logging.getLogger(__name__)

EXIT_UNEXPECTED_ERROR = 10
EXIT_CONFIG_ERROR = 11
EXIT_GIT_ERROR = 12
EXIT_MISSING_REQUIRED = 13
EXIT_INVALID_FORCE = 14
EXIT_NO_COMMITS = 15
EXIT_NO_VERSION_TAG = 16
EXIT_TAG_PARSE_ERROR = 17

_EXIT_CODES: dict[type[NextsvError], int] = {
    ConfigError: EXIT_CONFIG_ERROR,
    GitError: EXIT_GIT_ERROR,
    MissingRequiredFilesError: EXIT_MISSING_REQUIRED,
    InvalidForceTransitionError: EXIT_INVALID_FORCE,
    NoCommitsFoundError: EXIT_NO_COMMITS,
    NoVersionTagError: EXIT_NO_VERSION_TAG,
    TagParseError: EXIT_TAG_PARSE_ERROR,
}


def exit_code_for(error: NextsvError) -> int:
    """Exit code for an error, matching the most specific registered class."""
    for cls in type(error).__mro__:
        if cls in _EXIT_CODES:
            return _EXIT_CODES[cls]
    return EXIT_UNEXPECTED_ERROR


def run_calculate(
    path: str | None,
    overrides: dict[str, Any],
    report_bump: bool,
    report_number: bool,
    report_level: bool,
    set_env: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the calculate command.

    Args:
        path: Optional path to the project directory
        overrides: Configuration values given on the command line
        report_bump: Print the bump word
        report_number: Print the next version tag
        report_level: Print the aggregate change level
        set_env: Environment variable to export the bump to
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path, overrides)
        repo = GitRepository(project_path)
        calculation = calculate_from_repo(config, repo)
    except MissingRequiredFilesError as e:
        err_console.print(f"[red]Error:[/] {e}")
        err_console.print(f"[dim]Change level: {e.level}[/]")
        raise SystemExit(exit_code_for(e)) from e
    except NextsvError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(exit_code_for(e)) from e

    for line in report_lines(calculation, report_bump, report_number, report_level):
        console.print(line, highlight=False)

    if set_env:
        export_bump(set_env, str(calculation.bump))


def report_lines(
    calculation: Calculation,
    report_bump: bool = True,
    report_number: bool = False,
    report_level: bool = False,
) -> list[str]:
    """Lines to print for a calculation, in a fixed order.

    The version line is left out when the bump is none.
    """
    lines = []
    if report_level:
        lines.append(str(calculation.level))
    if report_bump:
        lines.append(str(calculation.bump))
    if report_number and calculation.is_release:
        lines.append(str(calculation.next))
    return lines


def export_bump(name: str, value: str) -> None:
    """Export the bump to the environment.

    Sets the variable for child processes and, when running in GitHub
    Actions, appends it to the ``$GITHUB_ENV`` file for later steps.
    """
    os.environ[name] = value
    github_env = os.environ.get("GITHUB_ENV")
    if github_env:
        with Path(github_env).open("a", encoding="utf-8") as f:
            f.write(f"{name}={value}\n")
        logger.debug("Wrote %s=%s to %s", name, value, github_env)
