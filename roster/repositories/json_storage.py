"""
JSON file persistence adapter.

The file holds one JSON object mapping slot keys to their text values, the
same shape a browser key-value store would have, so several slots (or a
future schema version) can share one file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
import json

from roster.core.logging_config import get_logger, log_with_context
from roster.repositories.base import StorageError

logger = get_logger("storage")


class JsonFileSlot:
    def __init__(self, path: Path | str, key: str) -> None:
        self.path = Path(path)
        self.key = key

    def __repr__(self) -> str:
        return f"JsonFileSlot(path={str(self.path)!r}, key={self.key!r})"

    def _load_document(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageError(f"cannot read {self.path}: {exc}") from exc
        if not isinstance(document, dict):
            raise StorageError(f"{self.path} does not hold a JSON object")
        return document

    def read(self) -> Optional[str]:
        value = self._load_document().get(self.key)
        return value if isinstance(value, str) else None

    def write(self, value: str) -> None:
        try:
            document = self._load_document()
        except StorageError as exc:
            # A corrupt file must not block saving; it is replaced wholesale.
            log_with_context(
                logger,
                "WARNING",
                "JSON slot file unreadable; rewriting it",
                context={"storage_key": self.key},
                extra_data={"path": str(self.path), "error": str(exc)},
            )
            document = {}
        document[self.key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            log_with_context(
                logger,
                "ERROR",
                "JSON slot write failed",
                context={"storage_key": self.key},
                extra_data={"path": str(self.path), "error": str(exc)},
            )
            raise StorageError(f"cannot write {self.path}: {exc}") from exc
