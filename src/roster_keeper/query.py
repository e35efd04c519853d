"""Search filter for the roster table."""

from __future__ import annotations

from typing import Iterable, List, Optional

from .records import StudentRecord


def matches(record: StudentRecord, query: Optional[str]) -> bool:
    """Case-insensitive substring match on name, course or roll number."""
    q = (query or "").lower()
    return (
        q in record.name.lower()
        or q in record.course.lower()
        or q in str(record.roll_number)
    )


def filter_records(records: Iterable[StudentRecord], query: Optional[str] = "") -> List[StudentRecord]:
    """Return the records matching ``query``, keeping their order.

    An empty or None query matches everything.
    """
    return [r for r in records if matches(r, query)]
