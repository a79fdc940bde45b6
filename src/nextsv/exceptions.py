"""Exception hierarchy for nextsv.

Every error raised by nextsv derives from :class:`NextsvError` so callers
can catch the whole family at once, while the CLI branches on the concrete
class to choose an exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from nextsv.core.level import ChangeLevel


class NextsvError(Exception):
    """Base class for all nextsv errors."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(NextsvError):
    """Configuration could not be loaded."""


class ConfigNotFoundError(ConfigError):
    """No configuration file was found."""


class ConfigValidationError(ConfigError):
    """Configuration values are invalid."""


# =============================================================================
# Repository access
# =============================================================================


class GitError(NextsvError):
    """A git command failed."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        self.stderr = stderr
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


# =============================================================================
# Calculation
# =============================================================================


class NoVersionTagError(NextsvError):
    """No tag in the repository matches the version tag grammar."""

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        super().__init__(f"No version tag found with prefix {prefix!r}")


class TagParseError(NextsvError):
    """A tag carrying the version prefix is not a valid version."""

    def __init__(self, tag: str, component: str, detail: str) -> None:
        self.tag = tag
        self.component = component
        super().__init__(f"Invalid {component} in version tag {tag!r}: {detail}")


class NoCommitsFoundError(NextsvError):
    """There are no commits to calculate a version from."""

    def __init__(self, since: str | None = None) -> None:
        self.since = since
        msg = "No commits found"
        if since:
            msg += f" since {since}"
        super().__init__(msg)


class MissingRequiredFilesError(NextsvError):
    """Files required for a release were not changed.

    The change level that triggered enforcement is kept on the exception so
    it can still be reported.
    """

    def __init__(self, missing: Iterable[str], level: ChangeLevel) -> None:
        self.missing = sorted(missing)
        self.level = level
        super().__init__(f"Missing the required file(s): {', '.join(self.missing)}")


class InvalidForceTransitionError(NextsvError):
    """A forced transition is not allowed from the current version."""

    def __init__(self, current: object, force: object, reason: str) -> None:
        self.current = current
        self.force = force
        super().__init__(f"Cannot force {force} from version {current}: {reason}")
