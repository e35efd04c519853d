"""Errors raised by the roster library.

Per-line CSV rejection is not an error; those lines are filtered silently
and only show up in the accepted count.
"""

from __future__ import annotations


class RosterError(Exception):
    """Base error for this package."""


class InvalidField(RosterError, ValueError):
    """A manually entered field failed type or non-empty validation."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Invalid {field}: {reason}")
        self.field = field
        self.reason = reason


class DuplicateRollNumber(RosterError):
    """A record with this roll number already exists in the store."""

    def __init__(self, roll_number: int) -> None:
        super().__init__("A student with this Roll Number already exists!")
        self.roll_number = roll_number


class ParseFailure(RosterError):
    """Raised when CSV or stored text cannot be processed at all."""


class NothingToExport(RosterError):
    """Raised when exporting an empty roster."""

    def __init__(self) -> None:
        super().__init__("No data to export!")
