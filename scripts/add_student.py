#!/usr/bin/env python3
"""
Register a student directly in the configured roster slot.

Usage:
  python scripts/add_student.py --name "Ann Lee" --student-id 1023 --email a@b.com --contact 5551234567
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Make the roster package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from roster.services.roster_service import open_roster  # noqa: E402


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Add a student to the roster")
    ap.add_argument("--name", default="", help="Letters and spaces only")
    ap.add_argument("--student-id", default="", help="Numeric student ID")
    ap.add_argument("--email", default="", help="Email address (local@domain.tld)")
    ap.add_argument("--contact", default="", help="Contact number, at least 10 digits")
    args = ap.parse_args(argv)

    store = open_roster()
    result = store.validate(args.name, args.student_id, args.email, args.contact)
    if not result.ok:
        raise SystemExit(result.message)

    record = store.create(result.fields)
    print("OK: student added")
    print(f"  ID: {record.id}")
    print(f"  Name: {record.name}")
    print(f"  Student ID: {record.student_id}")


if __name__ == "__main__":
    try:
        main()
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
