"""Command line interface for nextsv."""

from __future__ import annotations

from nextsv.cli.app import cli

__all__ = ["cli"]
