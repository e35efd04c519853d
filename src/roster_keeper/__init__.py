"""Roster-keeper package.

Focus: CSV import/export and roll-number reconciliation for a single-user
student roster.
"""

__all__ = [
    "records",
    "csv_codec",
    "store",
    "reconcile",
    "query",
    "roster",
    "report",
]
