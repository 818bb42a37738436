"""Exceptions raised by the analysis pipeline."""

from __future__ import annotations

__all__ = ["InvalidInput", "InvalidConfig"]


class InvalidInput(ValueError):
    """The pixel buffer is missing, empty or malformed."""


class InvalidConfig(ValueError):
    """A configuration value is outside its permitted range."""
