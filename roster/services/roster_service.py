"""
Roster use cases: load, validate, create, update, delete, clear, search.

The in-memory list is the source of truth; the durable slot mirrors it and
is rewritten in full at the end of every mutation.
"""

from __future__ import annotations

from typing import Callable, Iterator, Optional
import json
import threading

from roster.core.config import Settings, get_settings
from roster.core.logging_config import get_logger, log_with_context
from roster.domain.students import (
    StudentFields,
    StudentRecord,
    ValidationResult,
    matches_query,
    new_record_id,
    validate_student,
)
from roster.repositories import build_slot
from roster.repositories.base import DurableSlot, StorageError

logger = get_logger("store")


class RosterError(Exception):
    """Base class for roster operation failures."""


class RecordNotFoundError(RosterError):
    def __init__(self, record_id: str):
        super().__init__(f"Record {record_id} not found")
        self.record_id = record_id


class PersistFailedError(RosterError):
    """The slot rejected a write; the in-memory change was rolled back."""


def decode_records(raw: Optional[str]) -> list[StudentRecord]:
    """Parse a slot value; raises ValueError when it is not a list of records."""
    if not raw:
        return []
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("roster document must be a JSON array")
    return [StudentRecord.from_dict(item) for item in data]


def encode_records(records: list[StudentRecord]) -> str:
    return json.dumps([record.to_dict() for record in records], ensure_ascii=False)


class RosterStore:
    """Owns the student collection and keeps it mirrored to one durable slot."""

    def __init__(self, slot: DurableSlot, id_factory: Callable[[], str] = new_record_id) -> None:
        self.slot = slot
        self._id_factory = id_factory
        self._records: list[StudentRecord] = []
        self._issued_ids: set[str] = set()
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> tuple[StudentRecord, ...]:
        return tuple(self._records)

    # -------------------------- persistence --------------------------
    def load(self) -> None:
        """
        Replace the collection with the slot's contents.

        A missing, empty, unreadable or malformed slot yields an empty
        collection; the failure is logged and never raised.
        """
        with self._lock:
            try:
                records = decode_records(self.slot.read())
            except (StorageError, ValueError) as exc:
                log_with_context(
                    logger,
                    "WARNING",
                    "Roster slot unreadable; starting empty",
                    context={"storage_key": self.slot.key},
                    extra_data={"error": str(exc)},
                )
                records = []
            self._records = records
            self._issued_ids.update(record.id for record in records)
            log_with_context(
                logger,
                "INFO",
                "Roster loaded",
                context={"storage_key": self.slot.key},
                extra_data={"count": len(records)},
            )

    def _persist(self, previous: list[StudentRecord]) -> None:
        try:
            self.slot.write(encode_records(self._records))
        except StorageError as exc:
            self._records = previous
            log_with_context(
                logger,
                "ERROR",
                "Roster write failed; change rolled back",
                context={"storage_key": self.slot.key},
                extra_data={"error": str(exc)},
            )
            raise PersistFailedError(str(exc)) from exc

    # -------------------------- validation --------------------------
    @staticmethod
    def validate(name: str | None, student_id: str | None, email: str | None, contact: str | None) -> ValidationResult:
        return validate_student(name, student_id, email, contact)

    # -------------------------- mutations --------------------------
    def _next_id(self) -> str:
        existing = {record.id for record in self._records}
        while True:
            candidate = self._id_factory()
            if candidate not in self._issued_ids and candidate not in existing:
                self._issued_ids.add(candidate)
                return candidate

    def create(self, fields: StudentFields) -> StudentRecord:
        with self._lock:
            record = StudentRecord.build(self._next_id(), fields)
            previous = list(self._records)
            self._records.append(record)
            self._persist(previous)
        log_with_context(logger, "INFO", "Student created", context={"record_id": record.id})
        return record

    def _index_of(self, record_id: str) -> int:
        for idx, record in enumerate(self._records):
            if record.id == record_id:
                return idx
        return -1

    def update(self, record_id: str, fields: StudentFields) -> StudentRecord:
        with self._lock:
            idx = self._index_of(record_id)
            if idx == -1:
                raise RecordNotFoundError(record_id)
            record = StudentRecord.build(record_id, fields)
            previous = list(self._records)
            self._records[idx] = record
            self._persist(previous)
        log_with_context(logger, "INFO", "Student updated", context={"record_id": record_id})
        return record

    def delete(self, record_id: str) -> None:
        with self._lock:
            previous = list(self._records)
            self._records = [record for record in self._records if record.id != record_id]
            removed = len(previous) - len(self._records)
            self._persist(previous)
        log_with_context(
            logger,
            "INFO",
            "Student deleted" if removed else "Delete skipped; no such record",
            context={"record_id": record_id},
        )

    def clear(self) -> None:
        with self._lock:
            previous = list(self._records)
            self._records = []
            self._persist(previous)
        log_with_context(logger, "INFO", "Roster cleared", extra_data={"removed": len(previous)})

    # -------------------------- queries --------------------------
    def get(self, record_id: str) -> Optional[StudentRecord]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def search(self, query: str = "") -> Iterator[StudentRecord]:
        snapshot = tuple(self._records)
        query = query or ""
        return (record for record in snapshot if matches_query(record, query))


def open_roster(settings: Optional[Settings] = None) -> RosterStore:
    """Build a store on the configured slot and load it."""
    settings = settings or get_settings()
    store = RosterStore(build_slot(settings))
    store.load()
    return store
