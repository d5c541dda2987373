"""
Persistence adapters.

Each adapter stores the whole roster document under one fixed key (today a
JSON file or a SQL row). Services depend on the DurableSlot contract rather
than on a concrete backend.
"""

from __future__ import annotations

from roster.core.config import Settings
from roster.repositories.base import DurableSlot, StorageError
from roster.repositories.json_storage import JsonFileSlot


def build_slot(settings: Settings) -> DurableSlot:
    """Pick the slot backend named by the settings."""
    if settings.storage_backend == "sql":
        from roster.repositories.sql_storage import SQLSlot

        return SQLSlot(settings.storage_key, settings.database_url)
    return JsonFileSlot(settings.data_file, settings.storage_key)


__all__ = ["DurableSlot", "StorageError", "JsonFileSlot", "build_slot"]
