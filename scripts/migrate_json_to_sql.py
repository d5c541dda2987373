"""One-off migration: copy the roster slot from the JSON file into the SQL table."""
from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Make the roster package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from roster.core.config import get_settings  # noqa: E402
from roster.repositories.base import StorageError  # noqa: E402
from roster.repositories.json_storage import JsonFileSlot  # noqa: E402
from roster.repositories.sql_storage import SQLSlot  # noqa: E402
from roster.services.roster_service import decode_records, encode_records  # noqa: E402


def migrate(data_file: Path, key: str, database_url: str) -> int:
    source = JsonFileSlot(data_file, key)
    if not source.path.exists():
        raise SystemExit(f"File not found: {source.path}")
    try:
        records = decode_records(source.read())
    except (StorageError, ValueError) as exc:
        raise SystemExit(f"Slot {key!r} in {source.path} is malformed: {exc}") from exc
    try:
        SQLSlot(key, database_url).write(encode_records(records))
    except StorageError as exc:
        raise SystemExit(f"Could not write SQL slot {key!r}: {exc}") from exc
    return len(records)


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Copy the roster from a JSON data file into a SQL database")
    ap.add_argument("--data-file", default=str(settings.data_file), help="Source JSON file")
    ap.add_argument("--key", default=settings.storage_key, help="Slot key to copy")
    ap.add_argument("--database-url", default=settings.database_url, help="Target database (default: DATABASE_URL)")
    args = ap.parse_args(argv)

    count = migrate(Path(args.data_file), args.key, args.database_url)
    print(f"OK: {count} records migrated to SQL slot {args.key!r}")


if __name__ == "__main__":
    main()
