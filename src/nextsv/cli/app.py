"""CLI entry point for nextsv."""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from nextsv.cli.commands.calculate import run_calculate
from nextsv.core.bump import ForceLevel
from nextsv.core.level import ChangeLevel

console = Console()
err_console = Console(stderr=True)

_LEVEL_CHOICES = [str(level) for level in ChangeLevel if level is not ChangeLevel.NONE]
_FORCE_CHOICES = [str(force) for force in ForceLevel]


def configure_logging(verbosity: int) -> None:
    """Send log records to stderr through rich.

    ``verbosity`` 0 shows warnings; each step up or down moves one level.
    """
    level = max(logging.DEBUG, min(logging.CRITICAL, logging.WARNING - 10 * verbosity))
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@click.command()
@click.version_option(package_name="nextsv")
@click.argument("path", required=False, type=click.Path(exists=True, file_okay=False))
@click.option("-p", "--prefix", default=None, help="Prefix identifying version tags.  [default: v]")
@click.option(
    "-f",
    "--force",
    type=click.Choice(_FORCE_CHOICES, case_sensitive=False),
    default=None,
    help="Force the transition instead of calculating it from the commits.",
)
@click.option(
    "--first",
    is_flag=True,
    help="With --force rc/beta/alpha: start the pre-release train for 1.0.0.",
)
@click.option(
    "-r",
    "--require",
    "required_files",
    multiple=True,
    metavar="FILE",
    help="File that must change before a release (repeatable).",
)
@click.option(
    "-e",
    "--enforce",
    "enforce_level",
    type=click.Choice(_LEVEL_CHOICES, case_sensitive=False),
    default=None,
    help="Change level from which required files are enforced.  [default: feature]",
)
@click.option(
    "-c",
    "--check",
    "check_level",
    type=click.Choice(_LEVEL_CHOICES, case_sensitive=False),
    default=None,
    help="Minimum change level to report a release; below it the bump is 'none'.",
)
@click.option("-s", "--scope", default=None, help="Only consider commits touching this directory.")
@click.option("-n", "--number", is_flag=True, help="Report the next version number.")
@click.option("-b", "--no-bump", is_flag=True, help="Do not report the bump.")
@click.option("--level", "report_level", is_flag=True, help="Report the change level of the commits.")
@click.option("--set-env", metavar="NAME", default=None, help="Export the bump to this environment variable.")
@click.option("-v", "--verbose", count=True, help="More logging output (repeatable).")
@click.option("-q", "--quiet", count=True, help="Less logging output (repeatable).")
def cli(
    path: str | None,
    prefix: str | None,
    force: str | None,
    first: bool,
    required_files: tuple[str, ...],
    enforce_level: str | None,
    check_level: str | None,
    scope: str | None,
    number: bool,
    no_bump: bool,
    report_level: bool,
    set_env: str | None,
    verbose: int,
    quiet: int,
) -> None:
    """Calculate the next semantic version from conventional commits.

    Prints the bump (none, patch, minor, major, release, alpha, beta, rc or
    1.0.0) and, with --number, the next version tag.
    """
    configure_logging(verbose - quiet)

    overrides = {
        "prefix": prefix,
        "force": force,
        "first": first or None,
        "required_files": list(required_files) or None,
        "enforce_level": enforce_level,
        "check_level": check_level,
        "scope": scope,
    }

    run_calculate(
        path=path,
        overrides=overrides,
        report_bump=not no_bump,
        report_number=number,
        report_level=report_level,
        set_env=set_env,
        console=console,
        err_console=err_console,
    )
