# Path: accountlens/core/vector_store/memory_store.py
# Purpose: Provide an in-process RecordStore.
# Layer: core/vector_store.
# Details: Keeps a primary map by id and a secondary map by account handle consistent under a lock.

from __future__ import annotations

import threading
from typing import Dict, List, Optional

from accountlens.core.models.domain import ImageRecord

from .base import RecordStore


class MemoryRecordStore(RecordStore):
    """Volatile record store, useful for tests and throwaway sessions."""

    def __init__(self, name: str = "memory") -> None:
        self.name = name
        self._lock = threading.Lock()
        self._records: Dict[str, ImageRecord] = {}
        self._by_handle: Dict[str, List[str]] = {}

    def initialize(self) -> None:
        return None

    def add(self, record: ImageRecord) -> None:
        with self._lock:
            if record.id in self._records:
                raise ValueError(f"Record {record.id} already exists.")
            self._records[record.id] = record
            self._by_handle.setdefault(record.account_handle, []).append(record.id)

    def get(self, record_id: str) -> Optional[ImageRecord]:
        with self._lock:
            return self._records.get(record_id)

    def get_all(self) -> List[ImageRecord]:
        with self._lock:
            return list(self._records.values())

    def get_by_account_handle(self, handle: str) -> List[ImageRecord]:
        with self._lock:
            return [self._records[record_id] for record_id in self._by_handle.get(handle, [])]

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def delete(self, record_id: str) -> bool:
        with self._lock:
            record = self._records.pop(record_id, None)
            if record is None:
                return False
            ids = self._by_handle.get(record.account_handle, [])
            ids.remove(record_id)
            if not ids:
                del self._by_handle[record.account_handle]
            return True

    def clear(self) -> int:
        with self._lock:
            removed = len(self._records)
            self._records.clear()
            self._by_handle.clear()
            return removed

    def dimension(self) -> Optional[int]:
        with self._lock:
            for record in self._records.values():
                return int(record.embedding.shape[0])
            return None
