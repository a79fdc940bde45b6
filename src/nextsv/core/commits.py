"""Conventional commit parsing and classification.

Each commit message is matched against the conventional commit grammar::

    type(scope)!: description

    optional body

    BREAKING CHANGE: optional footer

and mapped to a :class:`~nextsv.core.level.ChangeLevel`. Messages that do
not follow the convention are not an error; they count as ``OTHER``.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

from nextsv.core.level import ChangeLevel
from nextsv.exceptions import NoCommitsFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from nextsv.config.models import CommitsConfig
    from nextsv.vcs.git import Commit

logger = logging.getLogger(__name__)

# type(scope)!: description
COMMIT_PATTERN = re.compile(
    r"^(?P<type>[A-Za-z][\w-]*)"
    r"(?:\((?P<scope>[^()\r\n]*)\))?"
    r"(?P<breaking>!)?"
    r":\s+(?P<description>\S.*)$"
)

DEFAULT_BREAKING_PATTERN = r"^BREAKING[ -]CHANGE:"

DEFAULT_KNOWN_TYPES = frozenset(
    [
        "build",
        "chore",
        "ci",
        "docs",
        "feat",
        "fix",
        "perf",
        "refactor",
        "revert",
        "style",
        "test",
    ]
)


@dataclass(frozen=True)
class ParsedCommit:
    """A commit together with its conventional commit interpretation."""

    commit: Commit
    commit_type: str | None
    scope: str | None
    description: str
    is_breaking: bool
    is_conventional: bool

    @classmethod
    def from_commit(cls, commit: Commit, breaking_pattern: str = DEFAULT_BREAKING_PATTERN) -> ParsedCommit:
        """Parse a commit message.

        Args:
            commit: The commit to parse
            breaking_pattern: Regex matched (multiline) against the body and
                footers to detect a breaking change footer

        Returns:
            ParsedCommit, with ``is_conventional`` False when the header
            does not follow the convention
        """
        header, _, body = commit.message.strip().partition("\n")
        header = header.strip()

        match = COMMIT_PATTERN.match(header)
        if match is None:
            logger.debug("Commit %s is not a conventional commit: %r", commit.short_sha, header)
            return cls(
                commit=commit,
                commit_type=None,
                scope=None,
                description=header,
                is_breaking=False,
                is_conventional=False,
            )

        is_breaking = bool(match.group("breaking")) or bool(
            body and re.search(breaking_pattern, body, re.MULTILINE)
        )
        scope = match.group("scope")

        return cls(
            commit=commit,
            commit_type=match.group("type").lower(),
            scope=(scope.strip() or None) if scope else None,
            description=match.group("description").strip(),
            is_breaking=is_breaking,
            is_conventional=True,
        )

    def level(self, config: CommitsConfig | None = None) -> ChangeLevel:
        """Classify this commit into a change level."""
        if not self.is_conventional:
            return ChangeLevel.OTHER
        if self.is_breaking:
            return ChangeLevel.BREAKING

        types_feature = config.types_feature if config else ["feat"]
        types_fix = config.types_fix if config else ["fix", "revert"]

        if self.commit_type in types_feature:
            return ChangeLevel.FEATURE
        if self.commit_type in types_fix:
            return ChangeLevel.FIX
        if self.commit_type not in DEFAULT_KNOWN_TYPES:
            logger.debug("Unrecognised commit type %r counted as other", self.commit_type)
        return ChangeLevel.OTHER


def parse_commits(commits: Iterable[Commit], config: CommitsConfig) -> list[ParsedCommit]:
    """Parse a sequence of commits."""
    return [ParsedCommit.from_commit(commit, config.breaking_pattern) for commit in commits]


def classify_message(message: str, config: CommitsConfig | None = None) -> ChangeLevel:
    """Classify a bare commit message."""
    from nextsv.vcs.git import Commit

    breaking_pattern = config.breaking_pattern if config else DEFAULT_BREAKING_PATTERN
    return ParsedCommit.from_commit(Commit(sha="", message=message), breaking_pattern).level(config)


def aggregate_level(parsed: Sequence[ParsedCommit], config: CommitsConfig | None = None) -> ChangeLevel:
    """Return the highest change level across the parsed commits.

    Raises:
        NoCommitsFoundError: If there are no commits
    """
    if not parsed:
        raise NoCommitsFoundError()
    return max(pc.level(config) for pc in parsed)


def count_by_type(parsed: Iterable[ParsedCommit]) -> Counter[str]:
    """Count commits per conventional type (``other`` for non-conventional)."""
    return Counter(pc.commit_type or "other" for pc in parsed)


def filter_commits_by_path(commits: Iterable[Commit], prefix: str | None) -> list[Commit]:
    """Keep only the commits touching a file under a directory prefix.

    Args:
        commits: Commits to filter
        prefix: Repository-relative directory; ``None`` or empty keeps all

    Returns:
        Filtered list of commits, in their original order
    """
    if not prefix:
        return list(commits)

    directory = prefix.strip("/") + "/"
    return [
        commit
        for commit in commits
        if any(path == directory[:-1] or path.startswith(directory) for path in commit.changed_files)
    ]


def changed_files(commits: Iterable[Commit]) -> set[str]:
    """Union of the files changed by the commits."""
    files: set[str] = set()
    for commit in commits:
        files.update(commit.changed_files)
    return files
