"""Roster controller: the single owner of the record store.

Every user action goes through here. Validation runs before any mutation,
and each mutation is followed by a full save of the store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

from .csv_codec import EXPORT_FILENAME, decode, encode, read_csv_file, write_csv_file
from .errors import NothingToExport
from .query import filter_records
from .reconcile import add_record, delete_record, find_record, import_records
from .records import StudentRecord, require_valid
from .store import STORAGE_KEY, KeyValueStorage, RecordStore

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


@dataclass
class ImportOutcome:
    decoded: int
    added: int

    @property
    def message(self) -> str:
        if self.added > 0:
            return f"Successfully imported {self.added} student(s)."
        return "No new unique students imported."


def delete_prompt(roll_number: int) -> str:
    return f"Are you sure you want to delete student with Roll No: {roll_number}?"


class Roster:
    def __init__(self, storage: Optional[KeyValueStorage] = None, key: str = STORAGE_KEY) -> None:
        self._store = RecordStore(storage, key=key)
        loaded = self._store.load()
        logger.debug("loaded %d record(s) from storage key %r", loaded, key)

    @property
    def records(self) -> Tuple[StudentRecord, ...]:
        return self._store.records

    def __len__(self) -> int:
        return len(self._store)

    def filter(self, query: Optional[str] = "") -> List[StudentRecord]:
        return filter_records(self._store, query)

    def find(self, roll_number: int) -> Optional[StudentRecord]:
        return find_record(roll_number, self._store)

    def add(self, name: Any, roll_number: Any, course: Any, year: Any, gpa: Any) -> StudentRecord:
        """Validate manual entry and add it.

        Raises:
            InvalidField: a field is empty or not a number
            DuplicateRollNumber: the roll number is taken
        """
        return self.add_record(require_valid(name, roll_number, course, year, gpa))

    def add_record(self, record: StudentRecord) -> StudentRecord:
        record = add_record(record, self._store)
        self._store.save()
        logger.info("added student %d", record.roll_number)
        return record

    def delete(self, roll_number: int, confirm: Optional[Confirm] = None) -> bool:
        """Delete by roll number after confirmation.

        Returns False when the user declines; nothing is changed then.
        """
        if confirm is not None and not confirm(delete_prompt(roll_number)):
            return False
        removed = delete_record(roll_number, self._store)
        self._store.save()
        logger.info("deleted %d record(s) with roll %d", removed, roll_number)
        return True

    def import_csv(self, text: str) -> ImportOutcome:
        """Decode CSV text and merge new records; raises ParseFailure on unusable input."""
        decoded = decode(text)
        return self._merge(decoded.records)

    def import_file(self, path: str | Path) -> ImportOutcome:
        decoded = read_csv_file(path)
        return self._merge(decoded.records)

    def _merge(self, candidates: List[StudentRecord]) -> ImportOutcome:
        added = import_records(candidates, self._store)
        self._store.save()
        outcome = ImportOutcome(decoded=len(candidates), added=added)
        logger.info("import: %d decoded, %d added", outcome.decoded, outcome.added)
        return outcome

    def export_csv(self) -> str:
        return encode(self._store)

    def export_file(self, path: str | Path = EXPORT_FILENAME) -> Path:
        """Write the roster as CSV; a directory path gets ``students.csv`` inside it."""
        if len(self._store) == 0:
            raise NothingToExport()
        path = Path(path)
        if path.is_dir():
            path = path / EXPORT_FILENAME
        written = write_csv_file(path, self._store)
        logger.info("exported %d record(s) to %s", len(self._store), written)
        return written
