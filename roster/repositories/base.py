"""Contract shared by the durable slot backends."""
from __future__ import annotations

from typing import Optional, Protocol


class StorageError(Exception):
    """Raised when a slot backend cannot read or write its value."""


class DurableSlot(Protocol):
    """A single named key-value unit holding one serialized document."""

    key: str

    def read(self) -> Optional[str]:
        """Return the stored text, or None when the key has never been written."""

    def write(self, value: str) -> None:
        """Replace the stored text in full."""
