"""Command-line interface for zplc (``zplc compile``, ``zplc preview``...)."""
from __future__ import annotations

from zplc.cli.main import cli

__all__ = ["cli"]
