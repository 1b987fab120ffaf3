"""Exception hierarchy for interchange conversions.

Three failure classes are distinguished:

- PreconditionViolation: a required collaborator or input is missing.
  Raised immediately, never retried.
- ResolutionMiss: an element references a level, story or property that
  cannot be resolved. Builders catch it per element and skip the element.
- ExternalSystemFailure: the target model cannot be opened, created or
  saved, or a native call raised. Aborts the conversion when structural.
"""

from __future__ import annotations

from typing import Any


class InterchangeError(Exception):
    """Base exception for all interchange errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class PreconditionViolation(InterchangeError, ValueError):
    """A required collaborator or input is missing or invalid."""


class ResolutionMiss(InterchangeError, LookupError):
    """An element reference could not be resolved against a catalog.

    ``reason`` is one of ``"mapping"``, ``"level"``, ``"story"`` or
    ``"property"`` and selects the outcome tag recorded for the element.
    """

    def __init__(
        self,
        reason: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        self.reason = reason
        super().__init__(message, details)


class ExternalSystemFailure(InterchangeError, RuntimeError):
    """The external model could not be opened, created, saved or queried."""
