"""Tests for the bump engine."""

from __future__ import annotations

import pytest

from nextsv.core.bump import (
    Bump,
    Calculate,
    Force,
    ForceDirective,
    ForceLevel,
    next_version,
)
from nextsv.core.level import ChangeLevel
from nextsv.core.version import Version
from nextsv.exceptions import InvalidForceTransitionError


def v(text: str) -> Version:
    return Version.parse(text)


def force(level: str, as_first: bool = False, change: ChangeLevel = ChangeLevel.OTHER) -> Force:
    return Force(ForceDirective(ForceLevel(level), as_first=as_first), change)


class TestBumpLabels:
    """Tests for the bump words."""

    def test_first_renders_as_version(self):
        """The first production release is reported as 1.0.0."""
        assert str(Bump.FIRST) == "1.0.0"

    def test_other_labels(self):
        """Other bumps render as their name."""
        assert [str(b) for b in (Bump.NONE, Bump.MINOR, Bump.RC)] == ["none", "minor", "rc"]


class TestForceDirective:
    """Tests for ForceDirective validation."""

    def test_as_first_requires_pre_release(self):
        """as_first only combines with rc, beta or alpha."""
        with pytest.raises(ValueError, match="as_first"):
            ForceDirective(ForceLevel.MINOR, as_first=True)

    def test_str(self):
        """Directives describe themselves."""
        assert str(ForceDirective(ForceLevel.RC, as_first=True)) == "rc (first)"


class TestCalculatedBump:
    """Tests for bumps calculated from the change level."""

    @pytest.mark.parametrize(
        ("current", "level", "bump", "expected"),
        [
            # Stable line
            ("1.2.3", ChangeLevel.BREAKING, Bump.MAJOR, "2.0.0"),
            ("1.2.3", ChangeLevel.FEATURE, Bump.MINOR, "1.3.0"),
            ("1.2.3", ChangeLevel.FIX, Bump.PATCH, "1.2.4"),
            ("1.2.3", ChangeLevel.OTHER, Bump.NONE, "1.2.3"),
            ("1.2.3", ChangeLevel.NONE, Bump.NONE, "1.2.3"),
            # Unstable 0.y.z line
            ("0.7.3", ChangeLevel.BREAKING, Bump.MINOR, "0.8.0"),
            ("0.7.3", ChangeLevel.FEATURE, Bump.PATCH, "0.7.4"),
            ("0.7.3", ChangeLevel.FIX, Bump.PATCH, "0.7.4"),
            ("0.7.3", ChangeLevel.OTHER, Bump.NONE, "0.7.3"),
            # Pre-release train continues regardless of level
            ("1.0.0-rc.1", ChangeLevel.BREAKING, Bump.RC, "1.0.0-rc.2"),
            ("2.1.0-beta.4", ChangeLevel.OTHER, Bump.BETA, "2.1.0-beta.5"),
            ("0.3.0-alpha.1", ChangeLevel.FIX, Bump.ALPHA, "0.3.0-alpha.2"),
        ],
    )
    def test_calculated(self, current, level, bump, expected):
        """Calculated bumps follow the semantic versioning rules."""
        outcome = next_version(v(current), Calculate(level))

        assert outcome.bump is bump
        assert outcome.version == v(expected)

    def test_next_is_never_lower(self):
        """A calculated next version never sorts below the current one."""
        for current in ("0.0.0", "0.4.9", "1.0.0", "3.2.1", "1.0.0-alpha.1", "2.0.0-rc.7"):
            for level in ChangeLevel:
                outcome = next_version(v(current), Calculate(level))
                assert outcome.version >= v(current)
                if outcome.bump is not Bump.NONE:
                    assert outcome.version > v(current)


class TestForcedBump:
    """Tests for forced transitions."""

    @pytest.mark.parametrize(
        ("current", "level", "bump", "expected"),
        [
            ("0.7.3", "major", Bump.MAJOR, "1.0.0"),
            ("1.2.3", "minor", Bump.MINOR, "1.3.0"),
            ("1.2.3", "patch", Bump.PATCH, "1.2.4"),
            ("1.3.0-rc.2", "minor", Bump.MINOR, "1.4.0"),
            ("1.3.0-rc.2", "release", Bump.RELEASE, "1.3.0"),
            ("0.9.1", "first", Bump.FIRST, "1.0.0"),
            ("1.0.0-rc.3", "first", Bump.FIRST, "1.0.0"),
        ],
    )
    def test_forced(self, current, level, bump, expected):
        """Forced core transitions ignore the commits."""
        outcome = next_version(v(current), force(level))

        assert outcome.bump is bump
        assert outcome.version == v(expected)

    def test_release_of_stable_is_none(self):
        """Forcing release on a stable version releases nothing."""
        outcome = next_version(v("1.2.3"), force("release"))

        assert outcome.bump is Bump.NONE
        assert outcome.version == v("1.2.3")

    def test_first_after_first_release_fails(self):
        """first cannot be forced once 1.0.0 has been released."""
        with pytest.raises(InvalidForceTransitionError, match="already been made"):
            next_version(v("1.0.0"), force("first"))

    def test_first_on_later_pre_release_fails(self):
        """first is only allowed from a pre-release of 1.0.0 itself."""
        with pytest.raises(InvalidForceTransitionError):
            next_version(v("2.0.0-rc.1"), force("first"))


class TestForcedPreRelease:
    """Tests for forced pre-release transitions."""

    def test_start_train_from_calculated_version(self):
        """From a stable version the train targets the calculated version."""
        outcome = next_version(v("1.3.0"), force("rc", change=ChangeLevel.FEATURE))

        assert outcome.bump is Bump.RC
        assert outcome.version == v("1.4.0-rc.1")

    def test_start_train_with_only_other_changes(self):
        """With nothing but other changes the train targets the next patch."""
        outcome = next_version(v("1.3.0"), force("beta"))

        assert outcome.version == v("1.3.1-beta.1")

    def test_start_train_as_first(self):
        """as_first targets 1.0.0 from the unstable line."""
        outcome = next_version(v("0.9.0"), force("rc", as_first=True, change=ChangeLevel.FIX))

        assert outcome.bump is Bump.RC
        assert outcome.version == v("1.0.0-rc.1")

    def test_as_first_on_stable_line_fails(self):
        """as_first is not allowed once 1.0.0 has been released."""
        with pytest.raises(InvalidForceTransitionError):
            next_version(v("1.2.0"), force("alpha", as_first=True))

    def test_same_label_increments(self):
        """Forcing the active label increments its number."""
        outcome = next_version(v("1.0.0-beta.2"), force("beta"))

        assert outcome.version == v("1.0.0-beta.3")

    def test_higher_label_restarts_numbering(self):
        """Moving up the label order restarts at 1."""
        outcome = next_version(v("1.0.0-alpha.5"), force("rc"))

        assert outcome.bump is Bump.RC
        assert outcome.version == v("1.0.0-rc.1")

    def test_lower_label_fails(self):
        """Moving down the label order is not allowed."""
        with pytest.raises(InvalidForceTransitionError, match="go back"):
            next_version(v("1.0.0-rc.1"), force("alpha"))

    def test_pre_release_sorts_above_current(self):
        """Starting a train never yields a version below the current one."""
        for current in ("0.1.0", "1.0.0", "4.5.6"):
            for level in (ChangeLevel.OTHER, ChangeLevel.FIX, ChangeLevel.FEATURE, ChangeLevel.BREAKING):
                outcome = next_version(v(current), force("alpha", change=level))
                assert outcome.version > v(current)


class TestForcedReleaseIdempotent:
    """Forcing release twice is the same as once."""

    @pytest.mark.parametrize("current", ["0.3.1-rc.1", "1.2.3", "2.0.0-alpha.4"])
    def test_idempotent(self, current):
        """release(release(v)) == release(v)."""
        once = next_version(v(current), force("release")).version
        twice = next_version(once, force("release")).version

        assert once == twice
