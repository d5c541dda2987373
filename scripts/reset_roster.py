#!/usr/bin/env python3
"""
Remove every student from the configured roster slot.

Usage:
  python scripts/reset_roster.py [--yes]
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
    ap = argparse.ArgumentParser(description="Clear all roster records")
    ap.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = ap.parse_args(argv)

    store = open_roster()
    count = len(store)
    if not args.yes:
        answer = input(f"Clear all {count} records? This cannot be undone. [y/N] ")
        if answer.strip().lower() not in {"y", "yes"}:
            print("Aborted")
            return

    store.clear()
    print(f"OK: {count} records removed")


if __name__ == "__main__":
    try:
        main()
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
