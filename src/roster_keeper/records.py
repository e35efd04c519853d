"""Student records and field validation.

A record only exists once all five fields validate:
- name, course: non-empty text (trimmed)
- roll_number, year: integers
- gpa: finite float, kept at full precision

Validation never hands back a half-typed record; callers get either
``Valid(record)`` or ``Invalid(field, reason)``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .errors import InvalidField

_INT_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class StudentRecord:
    name: str
    roll_number: int
    course: str
    year: int
    gpa: float

    def to_storage_dict(self) -> dict:
        """Attribute names used by the persisted roster."""
        return {
            "name": self.name,
            "roll": self.roll_number,
            "course": self.course,
            "year": self.year,
            "cgpa": self.gpa,
        }


@dataclass(frozen=True)
class Valid:
    record: StudentRecord


@dataclass(frozen=True)
class Invalid:
    field: str
    reason: str

    def to_error(self) -> InvalidField:
        return InvalidField(self.field, self.reason)


ValidationResult = Union[Valid, Invalid]


def parse_int(value: Any) -> Optional[int]:
    """Parse an integer field; returns None when the value is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if _INT_RE.fullmatch(text):
            try:
                return int(text)
            except ValueError:
                # Over the interpreter's digit limit for str -> int.
                return None
    return None


def parse_float(value: Any) -> Optional[float]:
    """Parse a finite float field; nan/inf and underscores are rejected."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not _FLOAT_RE.fullmatch(text):
            return None
        result = float(text)
    else:
        return None
    return result if math.isfinite(result) else None


def _clean_text(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()


def validate_fields(name: Any, roll_number: Any, course: Any, year: Any, gpa: Any) -> ValidationResult:
    """Validate raw field values in display order and build a record.

    Checks run in column order so the first failing field is reported.
    """
    clean_name = _clean_text(name)
    if not clean_name:
        return Invalid("name", "must not be empty")
    roll = parse_int(roll_number)
    if roll is None:
        return Invalid("roll_number", f"not an integer: {roll_number!r}")
    clean_course = _clean_text(course)
    if not clean_course:
        return Invalid("course", "must not be empty")
    parsed_year = parse_int(year)
    if parsed_year is None:
        return Invalid("year", f"not an integer: {year!r}")
    parsed_gpa = parse_float(gpa)
    if parsed_gpa is None:
        return Invalid("gpa", f"not a number: {gpa!r}")
    return Valid(
        StudentRecord(
            name=clean_name,
            roll_number=roll,
            course=clean_course,
            year=parsed_year,
            gpa=parsed_gpa,
        )
    )


def validate_record(record: StudentRecord) -> ValidationResult:
    """Re-check a record built elsewhere before it is admitted to a store."""
    return validate_fields(record.name, record.roll_number, record.course, record.year, record.gpa)


def require_valid(name: Any, roll_number: Any, course: Any, year: Any, gpa: Any) -> StudentRecord:
    """Validate manual-entry fields, raising InvalidField on the first failure."""
    result = validate_fields(name, roll_number, course, year, gpa)
    if isinstance(result, Invalid):
        raise result.to_error()
    return result.record


def from_storage_dict(data: Mapping[str, Any]) -> ValidationResult:
    """Validate one persisted entry (keys: name, roll, course, year, cgpa)."""
    if not isinstance(data, Mapping):
        return Invalid("entry", f"expected an object, got {type(data).__name__}")
    for key in ("name", "roll", "course", "year", "cgpa"):
        if key not in data:
            return Invalid(key, "missing")
    return validate_fields(data["name"], data["roll"], data["course"], data["year"], data["cgpa"])
