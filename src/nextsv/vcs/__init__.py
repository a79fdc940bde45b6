"""Version control access for nextsv."""

from __future__ import annotations

from nextsv.vcs.git import Commit, GitRepository

__all__ = ["Commit", "GitRepository"]
