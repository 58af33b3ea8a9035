# Path: accountlens/core/vector_store/sqlite_store.py
# Purpose: Provide a durable RecordStore backed by a local SQLite file.
# Layer: core/vector_store.
# Details: Embeddings are stored as float32 blobs; account handle and creation time are indexed.

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

import numpy as np

from accountlens.core.errors import StoreUnavailable
from accountlens.core.models.domain import ImageRecord

from .base import RecordStore

_COLUMNS = "id, embedding, dim, perceptual_hash, account_name, account_handle, context_tag, image_url, created_at"


class SqliteRecordStore(RecordStore):
    """RecordStore persisting one row per registered image in ``image_records``.

    A single connection is shared between worker threads and serialized with a lock.
    """

    def __init__(self, db_path: Path | str, name: str = "sqlite") -> None:
        self.db_path = Path(db_path)
        self.name = name
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = None

    # SQLite helpers
    @contextmanager
    def _connection(self, operation: str) -> Iterator[sqlite3.Connection]:
        """Yield the open connection, translating SQLite failures into StoreUnavailable."""

        with self._lock:
            if self._conn is None:
                raise StoreUnavailable(f"SqliteRecordStore.{operation} called before initialize().")
            try:
                yield self._conn
            except sqlite3.Error as exc:
                raise StoreUnavailable(f"SQLite {operation} failed: {exc}") from exc

    @staticmethod
    def _row_to_record(row: Tuple) -> ImageRecord:
        record_id, blob, dim, phash, name, handle, context_tag, image_url, created_at = row
        embedding = np.frombuffer(blob, dtype=np.float32, count=int(dim)).copy()
        return ImageRecord(
            id=record_id,
            embedding=embedding,
            perceptual_hash=phash,
            account_name=name,
            account_handle=handle,
            context_tag=context_tag,
            image_url=image_url,
            created_at=datetime.fromtimestamp(created_at, tz=timezone.utc),
        )

    # RecordStore interface
    def initialize(self) -> None:
        with self._lock:
            if self._conn is not None:
                return
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(self.db_path, check_same_thread=False)
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS image_records (
                        id TEXT PRIMARY KEY,
                        embedding BLOB NOT NULL,
                        dim INTEGER NOT NULL,
                        perceptual_hash TEXT NOT NULL,
                        account_name TEXT NOT NULL,
                        account_handle TEXT NOT NULL,
                        context_tag TEXT,
                        image_url TEXT,
                        created_at REAL NOT NULL
                    )
                    """
                )
                conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_image_records_handle ON image_records(account_handle)"
                )
                conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_image_records_created ON image_records(created_at)"
                )
                conn.commit()
            except (sqlite3.Error, OSError) as exc:
                raise StoreUnavailable(f"Could not open record store at {self.db_path}: {exc}") from exc
            self._conn = conn

    def add(self, record: ImageRecord) -> None:
        embedding = np.asarray(record.embedding, dtype=np.float32)
        with self._connection("add") as conn:
            with conn:
                conn.execute(
                    f"INSERT INTO image_records ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    (
                        record.id,
                        embedding.tobytes(),
                        int(embedding.shape[0]),
                        record.perceptual_hash,
                        record.account_name,
                        record.account_handle,
                        record.context_tag,
                        record.image_url,
                        record.created_at.timestamp(),
                    ),
                )

    def get(self, record_id: str) -> Optional[ImageRecord]:
        with self._connection("get") as conn:
            row = conn.execute(f"SELECT {_COLUMNS} FROM image_records WHERE id = ?", (record_id,)).fetchone()
        return self._row_to_record(row) if row else None

    def get_all(self) -> List[ImageRecord]:
        with self._connection("get_all") as conn:
            rows = conn.execute(f"SELECT {_COLUMNS} FROM image_records ORDER BY created_at, id").fetchall()
        return [self._row_to_record(row) for row in rows]

    def get_by_account_handle(self, handle: str) -> List[ImageRecord]:
        with self._connection("get_by_account_handle") as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM image_records WHERE account_handle = ? ORDER BY created_at, id",
                (handle,),
            ).fetchall()
        return [self._row_to_record(row) for row in rows]

    def count(self) -> int:
        with self._connection("count") as conn:
            (total,) = conn.execute("SELECT COUNT(*) FROM image_records").fetchone()
        return int(total)

    def delete(self, record_id: str) -> bool:
        with self._connection("delete") as conn:
            with conn:
                cursor = conn.execute("DELETE FROM image_records WHERE id = ?", (record_id,))
        return cursor.rowcount > 0

    def clear(self) -> int:
        with self._connection("clear") as conn:
            with conn:
                (removed,) = conn.execute("SELECT COUNT(*) FROM image_records").fetchone()
                conn.execute("DELETE FROM image_records")
        return int(removed)

    def dimension(self) -> Optional[int]:
        with self._connection("dimension") as conn:
            row = conn.execute("SELECT dim FROM image_records LIMIT 1").fetchone()
        return int(row[0]) if row else None

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
