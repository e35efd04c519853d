"""Record store and key-value storage backends.

The store keeps records in insertion order, indexed by roll number, and
mirrors the whole list to a key-value backend on ``save()``. The persisted
value is a JSON list of objects with keys name, roll, course, year, cgpa.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Protocol, Tuple

from .errors import DuplicateRollNumber, ParseFailure
from .records import Invalid, StudentRecord, from_storage_dict, validate_record

logger = logging.getLogger(__name__)

STORAGE_KEY = "students_data"


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage, mostly for tests and embedding."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStorage:
    """Key-value storage kept in a single JSON object file.

    A missing file reads as empty. Each write rewrites the whole file.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ParseFailure(f"Invalid JSON in storage file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ParseFailure(f"Storage file {self.path} does not hold a JSON object")
        return data

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            raise ParseFailure(f"Value under {key!r} in {self.path} is not a string")
        return value

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


class RecordStore:
    """Ordered records, unique by roll number."""

    def __init__(self, storage: Optional[KeyValueStorage] = None, key: str = STORAGE_KEY) -> None:
        self.storage = storage if storage is not None else MemoryStorage()
        self.key = key
        self._records: List[StudentRecord] = []
        self._rolls: set[int] = set()

    @property
    def records(self) -> Tuple[StudentRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[StudentRecord]:
        return iter(tuple(self._records))

    def __contains__(self, roll_number: object) -> bool:
        return roll_number in self._rolls

    def get(self, roll_number: int) -> Optional[StudentRecord]:
        for record in self._records:
            if record.roll_number == roll_number:
                return record
        return None

    def append(self, record: StudentRecord) -> StudentRecord:
        """Admit a record; returns the validated copy that was stored.

        Raises:
            InvalidField: a field is empty or not a number
            DuplicateRollNumber: the roll number is taken
        """
        checked = validate_record(record)
        if isinstance(checked, Invalid):
            raise checked.to_error()
        record = checked.record
        if record.roll_number in self._rolls:
            raise DuplicateRollNumber(record.roll_number)
        self._records.append(record)
        self._rolls.add(record.roll_number)
        return record

    def remove(self, roll_number: int) -> int:
        """Remove every record with this roll number; returns how many went."""
        kept = [r for r in self._records if r.roll_number != roll_number]
        removed = len(self._records) - len(kept)
        self._records = kept
        self._rolls.discard(roll_number)
        return removed

    def load(self) -> int:
        """Replace contents with the persisted list; absent key means empty.

        Entries that fail validation or repeat a roll number are skipped.
        """
        self._records = []
        self._rolls = set()
        raw = self.storage.get_item(self.key)
        if raw is None:
            return 0
        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ParseFailure(f"Stored roster under {self.key!r} is not valid JSON: {e}") from e
        if not isinstance(entries, list):
            raise ParseFailure(f"Stored roster under {self.key!r} is not a list")

        for idx, entry in enumerate(entries):
            checked = from_storage_dict(entry)
            if isinstance(checked, Invalid):
                logger.warning("skipping stored entry %d: invalid %s (%s)", idx, checked.field, checked.reason)
                continue
            if checked.record.roll_number in self._rolls:
                logger.warning("skipping stored entry %d: duplicate roll %d", idx, checked.record.roll_number)
                continue
            self.append(checked.record)
        return len(self._records)

    def save(self) -> None:
        payload = json.dumps([r.to_storage_dict() for r in self._records], ensure_ascii=False)
        self.storage.set_item(self.key, payload)
