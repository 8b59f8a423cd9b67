"""Changelog runner for lifecycle releases."""

from .context import ChangelogContext
from .runner import main

__all__ = ["ChangelogContext", "main"]
