"""SQLAlchemy models for the key-value storage table."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text, func

from .session import Base


class StorageSlot(Base):
    """One durable slot: a fixed key holding a whole serialized document."""

    __tablename__ = "storage_slots"

    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
