"""
Error Taxonomy
==============
Every failure the engine reports derives from ``PitchPathError``:

  - MissingFieldError       — an observed record lacks a required field
  - MalformedInputError     — a value is NaN, infinite or not a number
  - InvalidPitchSpecError   — no real flight time / velocity exists
  - InvalidTunnelPointError — commitment point outside the reference window

All of them are recoverable: the caller skips the pitch, clamps its UI
inputs, or clamps its commit-time control and tries again.
"""

from typing import Any, Optional


class PitchPathError(Exception):
    """Base class for all engine errors."""


class MissingFieldError(PitchPathError, KeyError):
    """A required field of an observed-measurement record is absent."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(field)

    def __str__(self) -> str:
        return f"Observed record is missing required field '{self.field}'"


class MalformedInputError(PitchPathError, ValueError):
    """A field is present but not a finite number."""

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"Field '{field}' must be a finite number, got {value!r}")


class InvalidPitchSpecError(PitchPathError, ValueError):
    """The speed / break / geometry combination has no physical solution."""


class InvalidTunnelPointError(PitchPathError, ValueError):
    """The commitment point lies outside the reference pitch's flight window."""

    def __init__(self, message: str, window: Optional[tuple] = None):
        self.window = window
        super().__init__(message)
