"""CSV import/export for student records.

Schema: Name,RollNo,Course,Year,CGPA (UTF-8, header optional on import).

Decoding picks a field splitter per line: lines without a double quote are
split on every comma (machine-written CSV); lines with one go through a
quoted-field scanner (spreadsheet exports with commas inside names or
courses). Lines that do not yield a valid record are dropped; only the
accepted count is reported.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

from .errors import ParseFailure
from .records import Invalid, StudentRecord, validate_fields

logger = logging.getLogger(__name__)

HEADER = "Name,RollNo,Course,Year,CGPA"
EXPORT_FILENAME = "students.csv"
EXPORT_MIME_TYPE = "text/csv;charset=utf-8"

_FIELD_COUNT = 5
_QUOTED_FIELD_RE = re.compile(r'(?:^|,)(\s*"(?:[^"]|"")*"\s*|[^,]*)')


@dataclass
class DecodeResult:
    records: List[StudentRecord] = field(default_factory=list)

    @property
    def accepted(self) -> int:
        return len(self.records)


class SimpleSplit:
    """Split on every comma; correct only when no field is quoted."""

    name = "simple"

    def split(self, line: str) -> List[str]:
        return line.split(",")


class QuotedSplit:
    """Scan quoted or bare comma-delimited segments left to right."""

    name = "quoted"

    def split(self, line: str) -> List[str]:
        values: List[str] = []
        for match in _QUOTED_FIELD_RE.finditer(line):
            values.append(_unquote(match.group(1).strip()))
        return values


def _unquote(segment: str) -> str:
    # A lone " counts as both opening and closing quote and unquotes to "".
    if segment.startswith('"') and segment.endswith('"'):
        return segment[1:-1].replace('""', '"')
    return segment


SIMPLE_SPLIT = SimpleSplit()
QUOTED_SPLIT = QuotedSplit()


def is_quoted_line(line: str) -> bool:
    return '"' in line


def choose_splitter(line: str) -> SimpleSplit | QuotedSplit:
    return QUOTED_SPLIT if is_quoted_line(line) else SIMPLE_SPLIT


def split_fields(line: str) -> List[str]:
    return choose_splitter(line).split(line)


def _is_header(line: str) -> bool:
    return "name" in line.lower()


def decode(text: str) -> DecodeResult:
    """Decode CSV text into candidate records.

    Malformed lines are skipped. Raises ParseFailure only when the input is
    not text at all (e.g. None), in which case nothing is decoded.
    """
    if not isinstance(text, str):
        raise ParseFailure(f"Cannot parse CSV input of type {type(text).__name__}")

    lines = text.strip().split("\n")
    start = 1 if _is_header(lines[0]) else 0

    result = DecodeResult()
    for lineno, raw in enumerate(lines[start:], start=start + 1):
        line = raw.strip()
        if not line:
            continue
        values = split_fields(line)
        if len(values) < _FIELD_COUNT:
            logger.debug("line %d: expected %d fields, got %d", lineno, _FIELD_COUNT, len(values))
            continue
        # Extra trailing fields are ignored.
        checked = validate_fields(*values[:_FIELD_COUNT])
        if isinstance(checked, Invalid):
            logger.debug("line %d: invalid %s (%s)", lineno, checked.field, checked.reason)
            continue
        result.records.append(checked.record)

    logger.debug("decoded %d record(s) from %d line(s)", result.accepted, len(lines))
    return result


def _format_number(value: int | float) -> str:
    if isinstance(value, float):
        return repr(value)
    return str(value)


def encode_record(record: StudentRecord) -> str:
    # Quotes inside name/course are written as-is (not doubled).
    return ",".join(
        [
            f'"{record.name}"',
            _format_number(record.roll_number),
            f'"{record.course}"',
            _format_number(record.year),
            _format_number(record.gpa),
        ]
    )


def encode(records: Iterable[StudentRecord]) -> str:
    """Encode records as CSV text with a header; every line ends in \\n."""
    lines = [HEADER]
    lines.extend(encode_record(r) for r in records)
    return "\n".join(lines) + "\n"


def read_csv_file(path: str | Path) -> DecodeResult:
    """Read a UTF-8 CSV file and decode it whole."""
    path = Path(path)
    text = path.read_text(encoding="utf-8-sig")
    return decode(text)


def write_csv_file(path: str | Path, records: Iterable[StudentRecord]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(encode(records))
    return path
