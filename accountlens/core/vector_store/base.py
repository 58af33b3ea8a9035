# Path: accountlens/core/vector_store/base.py
# Purpose: Define the RecordStore interface for persisting registered image records.
# Layer: core/vector_store.
# Details: Synchronous key-value contract with a secondary lookup by account handle.

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from accountlens.core.models.domain import ImageRecord


class RecordStore(ABC):
    """Abstract base class for pluggable record persistence backends.

    Methods are blocking; :class:`SimilarityIndex` calls them from worker threads,
    so implementations must be safe to call from more than one thread.
    """

    name: str

    @abstractmethod
    def initialize(self) -> None:
        """Create schemas or open handles. Must be safe to call more than once."""

    @abstractmethod
    def add(self, record: ImageRecord) -> None:
        """Persist a complete record atomically."""

    @abstractmethod
    def get(self, record_id: str) -> Optional[ImageRecord]:
        """Return the record with the given id if present."""

    @abstractmethod
    def get_all(self) -> List[ImageRecord]:
        """Return every stored record."""

    @abstractmethod
    def get_by_account_handle(self, handle: str) -> List[ImageRecord]:
        """Return all records registered for an account handle."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored records."""

    @abstractmethod
    def delete(self, record_id: str) -> bool:
        """Delete one record and report whether it existed."""

    @abstractmethod
    def clear(self) -> int:
        """Delete every record and return how many were removed."""

    @abstractmethod
    def dimension(self) -> Optional[int]:
        """Return the embedding length of stored records, or None when empty."""

    def close(self) -> None:
        """Release any underlying handles."""
