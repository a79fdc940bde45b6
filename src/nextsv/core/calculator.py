"""Next version calculation.

Ties the pieces of the core together over already collected inputs::

    commits ──► scope filter ──► classify ──► aggregate level
                                                   │
                       required files ◄────────────┤
                       threshold      ◄────────────┤
                                                   ▼
    current tag ─────────────────────────────► bump engine ──► Calculation
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from nextsv.core.bump import Bump, Calculate, Force, next_version
from nextsv.core.commits import (
    aggregate_level,
    changed_files,
    count_by_type,
    filter_commits_by_path,
    parse_commits,
)
from nextsv.core.level import ChangeLevel
from nextsv.core.policy import enforce_required_files, meets_threshold
from nextsv.core.version import latest_tag
from nextsv.exceptions import NoCommitsFoundError

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from nextsv.config.models import NextsvConfig
    from nextsv.core.commits import ParsedCommit
    from nextsv.core.version import Version, VersionTag
    from nextsv.vcs.git import Commit, GitRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Calculation:
    """Outcome of a calculation.

    Attributes:
        current: The tag the calculation started from.
        level: Aggregate change level of the commits, or ``NONE`` when the
            check threshold was not met.
        bump: The transition applied.
        next: The next version tag (``current`` when ``bump`` is ``none``).
        commits: The commits that were considered.
    """

    current: VersionTag
    level: ChangeLevel
    bump: Bump
    next: VersionTag
    commits: list[ParsedCommit] = field(default_factory=list)

    @property
    def next_version(self) -> Version:
        return self.next.version

    @property
    def is_release(self) -> bool:
        return self.bump is not Bump.NONE


def calculate(
    config: NextsvConfig,
    current: VersionTag,
    commits: Sequence[Commit],
    known_files: Collection[str] | None = None,
) -> Calculation:
    """Calculate the next version from the commits since ``current``.

    Args:
        config: Calculation settings
        current: Current version tag
        commits: Commits since the current tag
        known_files: Files tracked by the repository, used to skip required
            files that do not exist

    Returns:
        The calculation result

    Raises:
        NoCommitsFoundError: If no commits are in scope
        MissingRequiredFilesError: If required files were not changed
        InvalidForceTransitionError: If the forced transition is not allowed
    """
    in_scope = filter_commits_by_path(commits, config.scope)
    if config.scope:
        logger.debug("%d of %d commit(s) touch %s", len(in_scope), len(commits), config.scope)
    if not in_scope:
        raise NoCommitsFoundError(str(current))

    parsed = parse_commits(in_scope, config.commits)
    level = aggregate_level(parsed, config.commits)
    logger.info("Change level since %s is %s %s", current, level, dict(count_by_type(parsed)))

    enforce_required_files(
        level,
        config.enforce_level,
        config.required_files,
        changed_files(in_scope),
        known_files,
    )

    if not meets_threshold(level, config.check_level):
        return Calculation(current, ChangeLevel.NONE, Bump.NONE, current, parsed)

    directive = config.force_directive
    action = Force(directive, level) if directive is not None else Calculate(level)
    outcome = next_version(current.version, action)

    return Calculation(
        current=current,
        level=level,
        bump=outcome.bump,
        next=current.with_version(outcome.version),
        commits=parsed,
    )


def calculate_from_repo(config: NextsvConfig, repo: GitRepository) -> Calculation:
    """Collect the inputs from a git repository and calculate.

    Raises:
        NoVersionTagError: If no version tag exists for the prefix
        TagParseError: If a version tag is malformed
        GitError: If reading the repository fails
    """
    current = latest_tag(repo.tag_names(), config.prefix)
    commits = repo.commits_since(current, path=config.scope)
    known_files = repo.tracked_files() if config.required_files else None
    return calculate(config, current, commits, known_files)
