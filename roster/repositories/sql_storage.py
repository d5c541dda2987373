"""Durable slot stored as one row of the storage_slots table."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from roster.core.logging_config import get_logger, log_with_context
from roster.db.models import StorageSlot
from roster.db.session import Base, get_engine, get_session
from roster.repositories.base import StorageError

logger = get_logger("storage")


class SQLSlot:
    """
    Key-value slot backed by SQLAlchemy; writes upsert the row.

    The storage_slots table is created on first use, so a fresh database
    needs no separate schema step.
    """

    def __init__(self, key: str, database_url: str) -> None:
        self.key = key
        self.database_url = (database_url or "").strip()
        self._schema_ready = False

    def __repr__(self) -> str:
        return f"SQLSlot(key={self.key!r})"

    def _fail(self, action: str, exc: Exception) -> StorageError:
        log_with_context(
            logger,
            "ERROR",
            f"SQL slot {action} failed",
            context={"storage_key": self.key},
            extra_data={"error": str(exc)},
        )
        return StorageError(f"cannot {action} slot {self.key!r}: {exc}")

    def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        if not self.database_url:
            raise StorageError("DATABASE_URL must be configured to use the SQL backend.")
        Base.metadata.create_all(bind=get_engine(self.database_url), tables=[StorageSlot.__table__])
        self._schema_ready = True

    def read(self) -> Optional[str]:
        try:
            self._ensure_schema()
            with get_session(self.database_url) as session:
                entity = session.get(StorageSlot, self.key)
                return entity.value if entity else None
        except (SQLAlchemyError, ImportError, StorageError) as exc:
            raise self._fail("read", exc) from exc

    def write(self, value: str) -> None:
        now = datetime.now(timezone.utc)
        try:
            self._ensure_schema()
            with get_session(self.database_url) as session:
                entity = session.get(StorageSlot, self.key)
                if not entity:
                    session.add(StorageSlot(key=self.key, value=value, updated_at=now))
                else:
                    entity.value = value
                    entity.updated_at = now
                session.commit()
        except (SQLAlchemyError, ImportError, StorageError) as exc:
            raise self._fail("write", exc) from exc
