"""Core business logic for nextsv.

This module contains the fundamental building blocks:
- Change level hierarchy
- Conventional commit classification
- Semantic version and version tag parsing
- The bump engine for calculated and forced transitions
- Release policies (required files, threshold)
"""

from __future__ import annotations

from nextsv.core.bump import (
    Bump,
    BumpOutcome,
    Calculate,
    Force,
    ForceDirective,
    ForceLevel,
    next_version,
)
from nextsv.core.calculator import Calculation, calculate, calculate_from_repo
from nextsv.core.commits import ParsedCommit, aggregate_level, classify_message, parse_commits
from nextsv.core.level import ChangeLevel
from nextsv.core.policy import enforce_required_files, meets_threshold
from nextsv.core.version import (
    PreRelease,
    PreReleaseLabel,
    Version,
    VersionTag,
    latest_tag,
    parse_tag,
)

__all__ = [
    # Bump engine
    "Bump",
    "BumpOutcome",
    "Calculate",
    # Calculator
    "Calculation",
    # Levels and commits
    "ChangeLevel",
    "Force",
    "ForceDirective",
    "ForceLevel",
    "ParsedCommit",
    # Version
    "PreRelease",
    "PreReleaseLabel",
    "Version",
    "VersionTag",
    "aggregate_level",
    "calculate",
    "calculate_from_repo",
    "classify_message",
    # Policies
    "enforce_required_files",
    "latest_tag",
    "meets_threshold",
    "next_version",
    "parse_commits",
    "parse_tag",
]
