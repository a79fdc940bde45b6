"""Configuration management for nextsv."""

from __future__ import annotations

from nextsv.config.loader import load_config
from nextsv.config.models import CommitsConfig, NextsvConfig

__all__ = [
    "CommitsConfig",
    "NextsvConfig",
    "load_config",
]
