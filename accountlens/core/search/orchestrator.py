# Path: accountlens/core/search/orchestrator.py
# Purpose: Orchestrate search and registration by combining embedder, hasher, index, and scoring.
# Layer: core/search.
# Details: Reports forward-only progress during search; every failure propagates to the caller.

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, List, Optional, Union

from PIL import Image

from accountlens.core.embedders.base import Embedder
from accountlens.core.hashing.phash import PerceptualHasher
from accountlens.core.models.domain import (
    EngineStats,
    NewImageRecord,
    ScoredCandidate,
    SearchProgress,
    SearchStatus,
)
from accountlens.core.vector_store.index import SimilarityIndex
from .scoring import ScoringEngine

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[SearchProgress], Union[None, Awaitable[None]]]

DEFAULT_TOP_N = 50


class SearchOrchestrator:
    """High-level service bridging callers with the embedder, hasher, index, and scorer."""

    def __init__(
        self,
        embedder: Embedder,
        index: SimilarityIndex,
        hasher: Optional[PerceptualHasher] = None,
        scoring: Optional[ScoringEngine] = None,
        top_n: int = DEFAULT_TOP_N,
    ) -> None:
        self.embedder = embedder
        self.index = index
        self.hasher = hasher or PerceptualHasher()
        self.scoring = scoring or ScoringEngine(hasher=self.hasher)
        self.top_n = top_n

    async def search(
        self,
        image: Image.Image,
        context_tag: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[ScoredCandidate]:
        """
        Rank registered accounts by how likely they appear in ``image``.

        External calls:
        - accountlens/core/embedders/base.py::Embedder.embed - query embedding.
        - accountlens/core/hashing/phash.py::PerceptualHasher.hash - query hash.
        - accountlens/core/vector_store/index.py::SimilarityIndex.query_top_n - candidate window.
        - accountlens/core/search/scoring.py::ScoringEngine.rank - per-account fusion.
        """

        async def report(status: SearchStatus, percent: int, message: str) -> None:
            if on_progress is None:
                return
            outcome = on_progress(SearchProgress(status=status, percent=percent, message=message))
            if inspect.isawaitable(outcome):
                await outcome

        try:
            await report(SearchStatus.INITIALIZING, 0, "Preparing embedding model...")
            await self.embedder.ensure_ready()
            await report(SearchStatus.INITIALIZING, 20, "Embedding model ready")

            await report(SearchStatus.EXTRACTING_EMBEDDING, 30, "Extracting image features...")
            embedding = await self.embedder.embed(image)
            await report(SearchStatus.EXTRACTING_EMBEDDING, 50, "Image features extracted")

            query_hash = await asyncio.to_thread(self.hasher.hash, image)
            await report(SearchStatus.SEARCHING, 55, "Searching similar images...")

            results = await self.index.query_top_n(embedding, self.top_n)
            if not results:
                await report(SearchStatus.DONE, 100, "No candidates")
                return []
            await report(SearchStatus.SEARCHING, 70, f"Found {len(results)} candidate images")

            await report(SearchStatus.SCORING, 75, "Scoring candidates...")
            candidates = await self.scoring.rank(self.index, results, query_hash, context_tag)
            await report(SearchStatus.DONE, 100, "Done")
        except Exception as exc:
            logger.error("Search failed: %s", exc)
            raise

        logger.info("Search matched %d images across %d accounts", len(results), len(candidates))
        return candidates

    async def register(
        self,
        image: Image.Image,
        account_name: str,
        account_handle: str,
        context_tag: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> str:
        """Fingerprint ``image`` and append it to the index under the given account."""

        embedding = await self.embedder.embed(image)
        perceptual_hash = await asyncio.to_thread(self.hasher.hash, image)
        record_id = await self.index.insert(
            NewImageRecord(
                embedding=embedding,
                perceptual_hash=perceptual_hash,
                account_name=account_name,
                account_handle=account_handle,
                context_tag=context_tag,
                image_url=image_url,
            )
        )
        logger.info("Registered image %s for %s", record_id, account_handle)
        return record_id

    async def stats(self) -> EngineStats:
        """Return read-only counters describing the index and the embedder."""

        total = await self.index.count()
        accounts = await self.index.unique_accounts()
        return EngineStats(
            total_images=total,
            unique_account_count=len(accounts),
            embedding_provider_ready=self.embedder.is_ready,
        )
