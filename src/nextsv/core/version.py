"""Semantic version model and version tag parsing.

A version tag name has the exact form::

    <prefix><major>.<minor>.<patch>[-<alpha|beta|rc>.<number>]

Only three pre-release labels exist and they are ordered
``alpha < beta < rc``. A pre-release sorts before the release of the same
``major.minor.patch``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from enum import StrEnum
from functools import total_ordering
from typing import TYPE_CHECKING

from nextsv.exceptions import NoVersionTagError, TagParseError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"[0-9]+")
_REFS_PREFIX = "refs/tags/"


class PreReleaseLabel(StrEnum):
    """Pre-release train labels, declared in ascending order."""

    ALPHA = "alpha"
    BETA = "beta"
    RC = "rc"

    @property
    def rank(self) -> int:
        return list(PreReleaseLabel).index(self)


@total_ordering
@dataclass(frozen=True)
class PreRelease:
    """A pre-release suffix such as ``rc.2``."""

    label: PreReleaseLabel
    number: int = 1

    def __post_init__(self) -> None:
        if self.number < 1:
            raise ValueError(f"Pre-release number must be at least 1, got {self.number}")

    def __str__(self) -> str:
        return f"{self.label}.{self.number}"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PreRelease):
            return NotImplemented
        return (self.label.rank, self.number) < (other.label.rank, other.number)

    def next(self) -> PreRelease:
        """The following pre-release in the same train."""
        return PreRelease(self.label, self.number + 1)


@total_ordering
@dataclass(frozen=True)
class Version:
    """A semantic version with an optional pre-release.

    Examples:
        >>> Version(1, 2, 3)
        Version(major=1, minor=2, patch=3, pre_release=None)
        >>> str(Version(0, 3, 1, PreRelease(PreReleaseLabel.RC, 1)))
        '0.3.1-rc.1'
    """

    major: int
    minor: int
    patch: int
    pre_release: PreRelease | None = None

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            if getattr(self, name) < 0:
                raise ValueError(f"Version {name} must not be negative")

    def __str__(self) -> str:
        core = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre_release is not None:
            return f"{core}-{self.pre_release}"
        return core

    def _sort_key(self) -> tuple[int, int, int, int, int, int]:
        if self.pre_release is None:
            return (self.major, self.minor, self.patch, 1, 0, 0)
        return (
            self.major,
            self.minor,
            self.patch,
            0,
            self.pre_release.label.rank,
            self.pre_release.number,
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    @property
    def is_prerelease(self) -> bool:
        return self.pre_release is not None

    @property
    def is_stable_line(self) -> bool:
        """True once the first production release (1.0.0) has been made."""
        return self.major >= 1

    @property
    def core(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def bump_major(self) -> Version:
        return Version(self.major + 1, 0, 0)

    def bump_minor(self) -> Version:
        return Version(self.major, self.minor + 1, 0)

    def bump_patch(self) -> Version:
        return Version(self.major, self.minor, self.patch + 1)

    def release(self) -> Version:
        """This version without its pre-release suffix."""
        return replace(self, pre_release=None)

    def with_prerelease(self, label: PreReleaseLabel, number: int = 1) -> Version:
        return replace(self, pre_release=PreRelease(label, number))

    @classmethod
    def parse(cls, value: str) -> Version:
        """Parse a bare version string (no prefix)."""
        return parse_tag(value, "").version


@total_ordering
@dataclass(frozen=True)
class VersionTag:
    """A repository tag holding a version, e.g. ``v1.4.0-beta.2``.

    Tags compare by their version only.
    """

    prefix: str
    version: Version

    def __str__(self) -> str:
        return f"{self.prefix}{self.version}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionTag):
            return NotImplemented
        return self.version == other.version

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, VersionTag):
            return NotImplemented
        return self.version < other.version

    def __hash__(self) -> int:
        return hash(self.version)

    def with_version(self, version: Version) -> VersionTag:
        return VersionTag(self.prefix, version)


def _strip_refs(name: str) -> str:
    return name[len(_REFS_PREFIX) :] if name.startswith(_REFS_PREFIX) else name


def _parse_number(tag: str, component: str, value: str) -> int:
    if not _NUMBER.fullmatch(value):
        raise TagParseError(tag, component, f"{value!r} is not a number")
    return int(value)


def parse_tag(name: str, prefix: str) -> VersionTag:
    """Parse a tag name into a :class:`VersionTag`.

    Args:
        name: Tag name, optionally starting with ``refs/tags/``
        prefix: Version prefix expected at the start of the tag

    Returns:
        Parsed version tag

    Raises:
        TagParseError: If the tag does not follow the version tag grammar
    """
    tag = _strip_refs(name)
    if not tag.startswith(prefix):
        raise TagParseError(tag, "prefix", f"expected tag to start with {prefix!r}")

    core, sep, suffix = tag[len(prefix) :].partition("-")

    parts = core.split(".")
    if len(parts) != 3:
        raise TagParseError(tag, "version", f"expected three components, found {len(parts)}")
    major, minor, patch = (
        _parse_number(tag, component, value)
        for component, value in zip(("major", "minor", "patch"), parts, strict=True)
    )

    pre_release = None
    if sep:
        label, dot, number = suffix.partition(".")
        try:
            pre_label = PreReleaseLabel(label)
        except ValueError:
            raise TagParseError(
                tag, "pre-release label", f"{label!r} is not one of alpha, beta, rc"
            ) from None
        if not dot:
            raise TagParseError(tag, "pre-release number", "missing")
        pre_number = _parse_number(tag, "pre-release number", number)
        if pre_number < 1:
            raise TagParseError(tag, "pre-release number", "must be at least 1")
        pre_release = PreRelease(pre_label, pre_number)

    return VersionTag(prefix, Version(major, minor, patch, pre_release))


def is_version_candidate(name: str, prefix: str) -> bool:
    """Whether a tag name claims to be a version tag for this prefix.

    A candidate starts with the prefix immediately followed by a digit.
    Candidates that fail to parse are malformed version tags.
    """
    tag = _strip_refs(name)
    rest = tag[len(prefix) :]
    return tag.startswith(prefix) and rest[:1].isdigit()


def tags_matching(names: Iterable[str], prefix: str) -> list[VersionTag]:
    """Parse every version tag among the names, sorted ascending.

    Raises:
        TagParseError: If a candidate tag is malformed
    """
    return sorted(parse_tag(name, prefix) for name in names if is_version_candidate(name, prefix))


def latest_tag(names: Iterable[str], prefix: str) -> VersionTag:
    """Return the highest version tag among the names.

    Raises:
        NoVersionTagError: If no tag matches the prefix
        TagParseError: If a candidate tag is malformed
    """
    tags = tags_matching(names, prefix)
    if not tags:
        raise NoVersionTagError(prefix)
    latest = tags[-1]
    logger.debug("Current version tag is %s (of %d version tags)", latest, len(tags))
    return latest
