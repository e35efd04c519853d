"""CLI entrypoint for the roster manager.

Usage:
  python -m roster_keeper.cli list --query an
  python -m roster_keeper.cli import students.csv
  python -m roster_keeper.cli export --out out/students.csv
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List

from .csv_codec import EXPORT_FILENAME
from .errors import RosterError
from .report import format_table, print_table
from .roster import Roster
from .store import STORAGE_KEY, JsonFileStorage

DEFAULT_CONFIG = {
    "storage_path": "out/roster_store.json",
    "storage_key": STORAGE_KEY,
    "export_filename": EXPORT_FILENAME,
}


def load_config(path: str | Path) -> dict:
    path = Path(path)
    if not path.exists():
        # Default config
        return dict(DEFAULT_CONFIG)
    cfg = dict(DEFAULT_CONFIG)
    cfg.update(json.loads(path.read_text(encoding="utf-8")))
    return cfg


def open_roster(args: argparse.Namespace) -> Roster:
    cfg = load_config(args.config)
    storage_path = args.store or cfg["storage_path"]
    return Roster(JsonFileStorage(storage_path), key=cfg["storage_key"])


def cmd_list(args: argparse.Namespace) -> int:
    roster = open_roster(args)
    print_table(roster.filter(args.query))
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    roster = open_roster(args)
    record = roster.find(args.roll)
    if record is None:
        print(f"No student found with Roll Number {args.roll}")
        return 1
    print("Record Found:")
    print(format_table([record]))
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    roster = open_roster(args)
    roster.add(args.name, args.roll, args.course, args.year, args.cgpa)
    print("Student added successfully.")
    return 0


def _ask(prompt: str) -> bool:
    answer = input(f"{prompt} [y/N] ")
    return answer.strip().lower() in {"y", "yes"}


def cmd_delete(args: argparse.Namespace) -> int:
    roster = open_roster(args)
    if roster.find(args.roll) is None:
        print(f"No record found with Roll Number {args.roll}")
        return 1
    confirm = None if args.yes else _ask
    if roster.delete(args.roll, confirm=confirm):
        print("Record deleted successfully.")
    else:
        print("Deletion cancelled.")
    return 0


def cmd_import(args: argparse.Namespace) -> int:
    roster = open_roster(args)
    outcome = roster.import_file(args.input)
    print(outcome.message)
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    roster = open_roster(args)
    written = roster.export_file(args.out or cfg["export_filename"])
    print(f"Wrote {len(roster)} record(s) to: {written}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="rosterkeeper", description="Student roster manager")
    p.add_argument(
        "--config",
        default="resources/config.json",
        help="Path to config.json (optional; defaults will be used if missing)",
    )
    p.add_argument("--store", help="Path to the roster storage file (overrides config)")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    ls = sub.add_parser("list", help="Show students, optionally filtered")
    ls.add_argument("--query", default="", help="Match name, course or roll number")
    ls.set_defaults(func=cmd_list)

    search = sub.add_parser("search", help="Find a student by roll number")
    search.add_argument("roll", type=int)
    search.set_defaults(func=cmd_search)

    add = sub.add_parser("add", help="Add one student")
    add.add_argument("--name", required=True)
    add.add_argument("--roll", required=True, help="Unique roll number")
    add.add_argument("--course", required=True)
    add.add_argument("--year", required=True)
    add.add_argument("--cgpa", required=True)
    add.set_defaults(func=cmd_add)

    delete = sub.add_parser("delete", help="Delete a student by roll number")
    delete.add_argument("roll", type=int)
    delete.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    delete.set_defaults(func=cmd_delete)

    imp = sub.add_parser("import", help="Import students from a CSV file")
    imp.add_argument("input", help="Path to CSV (Name,RollNo,Course,Year,CGPA)")
    imp.set_defaults(func=cmd_import)

    exp = sub.add_parser("export", help="Export students to CSV")
    exp.add_argument("--out", help=f"Output path or directory (default: {EXPORT_FILENAME})")
    exp.set_defaults(func=cmd_export)

    return p


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except (RosterError, FileNotFoundError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
