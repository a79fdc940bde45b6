"""Version bump engine.

The engine is a single function, :func:`next_version`, over two kinds of
action:

- :class:`Calculate` derives the next version from the aggregate change
  level of the commits since the current tag.
- :class:`Force` applies an explicit transition chosen by the user,
  regardless of what the commits say.

Calculated bumps follow semantic versioning, with the usual relaxation for
the unstable ``0.y.z`` line::

    level      0.y.z         x.y.z (x >= 1)   pre-release
    breaking   minor         major            number + 1
    feature    patch         minor            number + 1
    fix        patch         patch            number + 1
    other      (no change)   (no change)      number + 1
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from nextsv.core.level import ChangeLevel
from nextsv.core.version import PreReleaseLabel, Version
from nextsv.exceptions import InvalidForceTransitionError

logger = logging.getLogger(__name__)

FIRST_VERSION = Version(1, 0, 0)


class Bump(StrEnum):
    """The transition reported for a calculation."""

    NONE = "none"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"
    RELEASE = "release"
    ALPHA = "alpha"
    BETA = "beta"
    RC = "rc"
    FIRST = "first"

    def __str__(self) -> str:
        return "1.0.0" if self is Bump.FIRST else self.value

    @classmethod
    def for_label(cls, label: PreReleaseLabel) -> Bump:
        return cls(label.value)


class ForceLevel(StrEnum):
    """Transitions that can be forced, independent of the commits."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    FIRST = "first"
    RELEASE = "release"
    RC = "rc"
    BETA = "beta"
    ALPHA = "alpha"

    @property
    def pre_release_label(self) -> PreReleaseLabel | None:
        try:
            return PreReleaseLabel(self.value)
        except ValueError:
            return None


@dataclass(frozen=True)
class ForceDirective:
    """A forced transition.

    Attributes:
        level: The transition to apply.
        as_first: For ``rc``/``beta``/``alpha`` only: start the pre-release
            train towards ``1.0.0`` instead of the calculated next version.
    """

    level: ForceLevel
    as_first: bool = False

    def __post_init__(self) -> None:
        if self.as_first and self.level.pre_release_label is None:
            raise ValueError(f"as_first only applies to rc, beta or alpha, not {self.level}")

    def __str__(self) -> str:
        return f"{self.level} (first)" if self.as_first else str(self.level)


@dataclass(frozen=True)
class Calculate:
    """Bump according to the aggregate change level."""

    level: ChangeLevel


@dataclass(frozen=True)
class Force:
    """Apply a forced transition.

    The aggregate level is still needed to pick the target version when a
    pre-release train is started from a stable version.
    """

    directive: ForceDirective
    level: ChangeLevel = ChangeLevel.OTHER


Action = Calculate | Force


@dataclass(frozen=True)
class BumpOutcome:
    """Result of the bump engine."""

    bump: Bump
    version: Version


def next_version(current: Version, action: Action) -> BumpOutcome:
    """Compute the next version.

    Args:
        current: The version of the current tag
        action: What drives the transition

    Returns:
        The bump label and the next version (equal to ``current`` when the
        bump is ``none``)

    Raises:
        InvalidForceTransitionError: If a forced transition is not allowed
            from ``current``
    """
    if isinstance(action, Force):
        outcome = _forced(current, action.directive, action.level)
    elif isinstance(action, Calculate):
        outcome = _calculated(current, action.level)
    else:
        raise TypeError(f"Unknown bump action: {action!r}")

    logger.debug("Bump %s: %s -> %s (%s)", action, current, outcome.version, outcome.bump)
    return outcome


def _calculated(current: Version, level: ChangeLevel) -> BumpOutcome:
    if level is ChangeLevel.NONE:
        return BumpOutcome(Bump.NONE, current)

    if current.pre_release is not None:
        # The pre-release train continues whatever the commits contain
        return BumpOutcome(
            Bump.for_label(current.pre_release.label),
            Version(*current.core, current.pre_release.next()),
        )

    if current.is_stable_line:
        if level is ChangeLevel.BREAKING:
            return BumpOutcome(Bump.MAJOR, current.bump_major())
        if level is ChangeLevel.FEATURE:
            return BumpOutcome(Bump.MINOR, current.bump_minor())
    else:
        if level is ChangeLevel.BREAKING:
            return BumpOutcome(Bump.MINOR, current.bump_minor())
        if level is ChangeLevel.FEATURE:
            return BumpOutcome(Bump.PATCH, current.bump_patch())

    if level is ChangeLevel.FIX:
        return BumpOutcome(Bump.PATCH, current.bump_patch())

    return BumpOutcome(Bump.NONE, current)


def _forced(current: Version, directive: ForceDirective, level: ChangeLevel) -> BumpOutcome:
    force = directive.level

    if force is ForceLevel.MAJOR:
        return BumpOutcome(Bump.MAJOR, current.bump_major())
    if force is ForceLevel.MINOR:
        return BumpOutcome(Bump.MINOR, current.bump_minor())
    if force is ForceLevel.PATCH:
        return BumpOutcome(Bump.PATCH, current.bump_patch())
    if force is ForceLevel.RELEASE:
        if not current.is_prerelease:
            return BumpOutcome(Bump.NONE, current)
        return BumpOutcome(Bump.RELEASE, current.release())
    if force is ForceLevel.FIRST:
        _check_first_allowed(current, directive)
        return BumpOutcome(Bump.FIRST, FIRST_VERSION)

    label = force.pre_release_label
    if label is None:
        raise TypeError(f"Unhandled force level: {force!r}")
    return BumpOutcome(Bump.for_label(label), _forced_pre_release(current, directive, label, level))


def _check_first_allowed(current: Version, directive: ForceDirective) -> None:
    if current.major == 0 or (current.is_prerelease and current.core == FIRST_VERSION.core):
        return
    raise InvalidForceTransitionError(
        current, directive, "the first production release has already been made"
    )


def _forced_pre_release(
    current: Version,
    directive: ForceDirective,
    label: PreReleaseLabel,
    level: ChangeLevel,
) -> Version:
    active = current.pre_release

    if active is None:
        if directive.as_first:
            _check_first_allowed(current, directive)
            target = FIRST_VERSION
        else:
            # Other/None would leave the core unchanged and the pre-release
            # would sort below the current release.
            target = _calculated(current, max(level, ChangeLevel.FIX)).version
        return target.with_prerelease(label)

    if active.label is label:
        return Version(*current.core, active.next())

    if label.rank > active.label.rank:
        return current.with_prerelease(label)

    raise InvalidForceTransitionError(
        current,
        directive,
        f"{label} would go back from the active {active.label} pre-release",
    )
