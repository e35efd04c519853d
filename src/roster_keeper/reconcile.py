"""Reconciliation of records into the store.

Roll numbers are the only identity check:
- import: invalid candidates and ones whose roll already exists are skipped,
  never overwritten
- manual add: an existing roll is an error
- delete: removes all records with the roll (at most one in practice)

These functions mutate the store but do not persist it; the roster
controller saves once per user action.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .errors import DuplicateRollNumber
from .records import Invalid, StudentRecord, validate_record
from .store import RecordStore

logger = logging.getLogger(__name__)


def import_records(candidates: Iterable[StudentRecord], store: RecordStore) -> int:
    """Append candidates with unseen roll numbers, in order.

    Returns:
        Number of records newly added. Duplicates inside the batch are
        skipped too, since the first one is already in the store.
    """
    added = 0
    for candidate in candidates:
        checked = validate_record(candidate)
        if isinstance(checked, Invalid):
            logger.debug("skipping invalid candidate: %s (%s)", checked.field, checked.reason)
            continue
        candidate = checked.record
        if candidate.roll_number in store:
            logger.debug("skipping duplicate roll %d", candidate.roll_number)
            continue
        store.append(candidate)
        added += 1
    return added


def add_record(record: StudentRecord, store: RecordStore) -> StudentRecord:
    checked = validate_record(record)
    if isinstance(checked, Invalid):
        raise checked.to_error()
    if checked.record.roll_number in store:
        raise DuplicateRollNumber(checked.record.roll_number)
    return store.append(checked.record)


def delete_record(roll_number: int, store: RecordStore) -> int:
    return store.remove(roll_number)


def find_record(roll_number: int, store: RecordStore) -> Optional[StudentRecord]:
    return store.get(roll_number)
