# Path: accountlens/core/vector_store/index.py
# Purpose: Provide the asynchronous similarity index over a RecordStore.
# Layer: core/vector_store.
# Details: Brute-force cosine ranking, per-account aggregation, and lazy shared store initialization.

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

import numpy as np

from accountlens.core.errors import AccountLensError, DimensionMismatch, StoreUnavailable
from accountlens.core.hashing.phash import PerceptualHasher
from accountlens.core.models.domain import AccountSummary, ImageRecord, NewImageRecord, SearchResult

from .base import RecordStore

logger = logging.getLogger(__name__)


def cosine_similarity(query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Cosine similarity of ``query`` against each row of ``matrix``; zero-norm pairs score 0."""

    dots = matrix @ query
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
    scores = np.zeros_like(dots)
    np.divide(dots, norms, out=scores, where=norms != 0)
    return scores


class SimilarityIndex:
    """Durable collection of image fingerprints queried by linear scan.

    All operations are coroutines; the blocking store is driven from worker threads.
    The scan is O(n) per query, which is the intended design at a scale of
    hundreds to low thousands of registrations.
    """

    def __init__(self, store: RecordStore, dim: Optional[int] = None) -> None:
        self.store = store
        self.dim = dim
        self._ready = False
        self._init_task: Optional[asyncio.Future] = None
        self._insert_lock = asyncio.Lock()

    async def _ensure_initialized(self) -> None:
        """Initialize the store once; concurrent first callers share the same attempt."""

        if self._ready:
            return
        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._initialize())
        await asyncio.shield(self._init_task)

    async def _initialize(self) -> None:
        try:
            await asyncio.to_thread(self.store.initialize)
        except asyncio.CancelledError:
            self._init_task = None
            raise
        except Exception as exc:
            self._init_task = None
            if isinstance(exc, AccountLensError):
                raise
            raise StoreUnavailable(f"Record store {self.store.name} failed to initialize: {exc}") from exc
        self._ready = True
        logger.info("Record store %s initialized", self.store.name)

    async def _call(self, method, *args):
        await self._ensure_initialized()
        return await asyncio.to_thread(method, *args)

    async def dimension(self) -> Optional[int]:
        """Return the dimensionality every record and query must share, if established."""

        if self.dim is not None:
            return self.dim
        return await self._call(self.store.dimension)

    async def insert(self, new_record: NewImageRecord) -> str:
        """Assign an id and timestamp, persist the record, and return the id."""

        if not PerceptualHasher.is_valid(new_record.perceptual_hash):
            raise ValueError(f"Perceptual hash {new_record.perceptual_hash!r} is not a 64-bit hex string.")

        embedding = np.asarray(new_record.embedding, dtype=np.float32).reshape(-1)
        record = ImageRecord(
            id=f"img_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}",
            embedding=embedding,
            perceptual_hash=new_record.perceptual_hash.lower(),
            account_name=new_record.account_name,
            account_handle=new_record.account_handle,
            context_tag=new_record.context_tag,
            image_url=new_record.image_url,
            created_at=datetime.now(timezone.utc),
        )

        # The dimension check and the add must not interleave with another insert.
        async with self._insert_lock:
            expected = await self.dimension()
            if expected is not None and embedding.shape[0] != expected:
                raise DimensionMismatch(expected=expected, actual=int(embedding.shape[0]))
            await self._call(self.store.add, record)
        logger.debug("Record added: %s (%s)", record.id, record.account_handle)
        return record.id

    async def get_all(self) -> List[ImageRecord]:
        return await self._call(self.store.get_all)

    async def get(self, record_id: str) -> Optional[ImageRecord]:
        return await self._call(self.store.get, record_id)

    async def get_by_account_handle(self, handle: str) -> List[ImageRecord]:
        return await self._call(self.store.get_by_account_handle, handle)

    async def count(self) -> int:
        return await self._call(self.store.count)

    async def delete(self, record_id: str) -> bool:
        return await self._call(self.store.delete, record_id)

    async def clear(self) -> int:
        removed = await self._call(self.store.clear)
        logger.info("Cleared %d records from %s", removed, self.store.name)
        return removed

    async def query_top_n(self, query_embedding: Sequence[float], n: int) -> List[SearchResult]:
        """Rank every stored record by cosine similarity and return the best ``n``.

        Raises:
            DimensionMismatch: if the query length differs from the configured
                dimension or from any stored embedding.
        """

        if n < 1:
            raise ValueError("n must be >= 1.")

        query = np.asarray(query_embedding, dtype=np.float32).reshape(-1)
        if self.dim is not None and query.shape[0] != self.dim:
            raise DimensionMismatch(expected=self.dim, actual=int(query.shape[0]))

        records = await self.get_all()
        if not records:
            return []

        for record in records:
            if record.embedding.shape[0] != query.shape[0]:
                raise DimensionMismatch(expected=int(record.embedding.shape[0]), actual=int(query.shape[0]))

        matrix = np.vstack([record.embedding for record in records]).astype(np.float32)
        scores = cosine_similarity(query, matrix)
        ranked = np.argsort(-scores, kind="stable")[:n]
        return [SearchResult(record=records[idx], embedding_score=float(scores[idx])) for idx in ranked]

    async def unique_accounts(self) -> List[AccountSummary]:
        """Return one summary per account handle, most registrations first."""

        summaries: Dict[str, AccountSummary] = {}
        for record in await self.get_all():
            summary = summaries.get(record.account_handle)
            if summary is None:
                summaries[record.account_handle] = AccountSummary(
                    name=record.account_name, handle=record.account_handle, count=1
                )
            else:
                summary.count += 1
        return sorted(summaries.values(), key=lambda summary: summary.count, reverse=True)

    def close(self) -> None:
        self.store.close()
        self._ready = False
        self._init_task = None
