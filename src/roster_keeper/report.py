"""Rendering helpers for roster listings."""

from __future__ import annotations

from typing import Iterable, List

from .records import StudentRecord

_ROW_FORMAT = "%-20s %-10s %-20s %-6s %-6s"
_RULE = "-" * 69


def render_row(record: StudentRecord) -> dict:
    """Display values for one record; GPA is shown to 2 decimals."""
    return {
        "name": record.name,
        "roll": record.roll_number,
        "course": record.course,
        "year": record.year,
        "cgpa": f"{record.gpa:.2f}",
    }


def render_rows(records: Iterable[StudentRecord]) -> List[dict]:
    return [render_row(r) for r in records]


def count_label(count: int) -> str:
    return f"{count} Student{'' if count == 1 else 's'}"


def format_table(records: Iterable[StudentRecord]) -> str:
    """Fixed-width table of records, or a notice when there are none."""
    rows = render_rows(records)
    if not rows:
        return "No records available."
    lines = [_ROW_FORMAT % ("Name", "RollNo", "Course", "Year", "CGPA"), _RULE]
    for row in rows:
        lines.append(_ROW_FORMAT % (row["name"], row["roll"], row["course"], row["year"], row["cgpa"]))
    lines.append(_RULE)
    return "\n".join(lines)


def print_table(records: Iterable[StudentRecord]) -> None:
    records = list(records)
    print(format_table(records))
    print(count_label(len(records)))
