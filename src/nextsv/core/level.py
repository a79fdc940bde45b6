"""Change level hierarchy.

Commits are ranked by the impact they have on the public surface of a
project. The ranking is totally ordered so the level of a set of commits is
simply the maximum over its members::

    NONE < OTHER < FIX < FEATURE < BREAKING

``NONE`` is never produced by classifying a commit. It marks a calculation
that did not reach its reporting threshold.
"""

from __future__ import annotations

from enum import IntEnum


class ChangeLevel(IntEnum):
    """Impact of a change, ordered from least to most significant."""

    NONE = 0
    OTHER = 1
    FIX = 2
    FEATURE = 3
    BREAKING = 4

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: str | int | ChangeLevel) -> ChangeLevel:
        """Parse a level from its name (case-insensitive) or integer value.

        Raises:
            ValueError: If the value does not name a level
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        try:
            return cls[value.strip().upper()]
        except KeyError:
            names = ", ".join(str(level) for level in cls)
            raise ValueError(f"Unknown change level {value!r} (expected one of: {names})") from None
