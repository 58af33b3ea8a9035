# Path: accountlens/core/search/scoring.py
# Purpose: Fuse per-image similarity signals into a ranked list of candidate accounts.
# Layer: core/search.
# Details: Embedding, hash, metadata, and frequency signals are weighted; the best image decides each account.

"""
Multi-signal account scoring.

Each candidate image carries three per-image signals:

    embedding  cosine similarity of the query and stored embeddings (0-1)
    hash       perceptual hash similarity (0-1)
    metadata   context tag bonus (0, 0.1 or 0.2)

plus one per-account signal, the frequency bonus (0-0.1), which rewards
accounts with many registrations across the whole index.

The metadata and frequency bonuses are already scaled into sub-ranges and are
then multiplied again by their fusion weights. A perfect single-account
self-match therefore totals 0.805, not 1.0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from accountlens.core.hashing.phash import PerceptualHasher
from accountlens.core.models.domain import (
    AccountSummary,
    ComponentScores,
    MatchedImage,
    ScoredCandidate,
    SearchResult,
)
from accountlens.core.vector_store.index import SimilarityIndex

logger = logging.getLogger(__name__)

EXACT_CONTEXT_BONUS = 0.2
PARTIAL_CONTEXT_BONUS = 0.1
MAX_FREQUENCY_BONUS = 0.1


@dataclass(frozen=True)
class FusionWeights:
    embedding: float = 0.50
    hash: float = 0.30
    metadata: float = 0.15
    frequency: float = 0.05


@dataclass
class _ImageSignals:
    id: str
    embedding: float
    hash: float
    metadata: float


def metadata_bonus(candidate_tag: Optional[str], context_tag: Optional[str]) -> float:
    """Return 0.2 for identical tags, 0.1 when one contains the other, else 0."""

    if not candidate_tag or not context_tag:
        return 0.0
    if candidate_tag == context_tag:
        return EXACT_CONTEXT_BONUS
    if context_tag in candidate_tag or candidate_tag in context_tag:
        return PARTIAL_CONTEXT_BONUS
    return 0.0


def frequency_bonus(count: int, max_count: int) -> float:
    """Scale an account's registration count against the busiest account into [0, 0.1]."""

    return (count / max(max_count, 1)) * MAX_FREQUENCY_BONUS


class ScoringEngine:
    """Turn embedding-ranked image hits into per-account ScoredCandidates."""

    def __init__(self, weights: Optional[FusionWeights] = None, hasher: Optional[PerceptualHasher] = None) -> None:
        self.weights = weights or FusionWeights()
        self.hasher = hasher or PerceptualHasher()

    def _image_score(self, signals: _ImageSignals) -> float:
        w = self.weights
        return signals.embedding * w.embedding + signals.hash * w.hash + signals.metadata * w.metadata

    def fuse(
        self,
        results: Sequence[SearchResult],
        query_hash: str,
        accounts: Sequence[AccountSummary],
        context_tag: Optional[str] = None,
    ) -> List[ScoredCandidate]:
        """
        Aggregate image hits by account handle and rank the accounts.

        Args:
            results: Embedding-ranked hits from the similarity index.
            query_hash: Perceptual hash of the query image.
            accounts: Whole-index registration counts from ``unique_accounts``.
            context_tag: Optional event/context name of the query.

        Returns:
            One ScoredCandidate per account handle, highest total first.
        """

        counts = {account.handle: account.count for account in accounts}

        names: Dict[str, str] = {}
        groups: Dict[str, List[_ImageSignals]] = {}
        for result in results:
            record = result.record
            handle = record.account_handle
            names.setdefault(handle, record.account_name)
            groups.setdefault(handle, []).append(
                _ImageSignals(
                    id=record.id,
                    embedding=result.embedding_score,
                    hash=self.hasher.similarity(query_hash, record.perceptual_hash),
                    metadata=metadata_bonus(record.context_tag, context_tag),
                )
            )

        # Accounts missing from the counts fall back to their window size; the maximum covers them too.
        image_counts = {handle: counts.get(handle, len(images)) for handle, images in groups.items()}
        max_count = max([*counts.values(), *image_counts.values()], default=1)

        candidates: List[ScoredCandidate] = []
        for handle, images in groups.items():
            best = images[0]
            best_score = self._image_score(best)
            for image in images[1:]:
                score = self._image_score(image)
                if score > best_score:
                    best, best_score = image, score

            image_count = image_counts[handle]
            freq = frequency_bonus(image_count, max_count)
            candidates.append(
                ScoredCandidate(
                    account_name=names[handle],
                    account_handle=handle,
                    scores=ComponentScores(
                        embedding=best.embedding,
                        hash=best.hash,
                        metadata=best.metadata,
                        frequency=freq,
                    ),
                    total_score=best_score + freq * self.weights.frequency,
                    matched_images=[MatchedImage(id=image.id, score=image.embedding) for image in images],
                    image_count=image_count,
                )
            )

        candidates.sort(key=lambda candidate: candidate.total_score, reverse=True)
        return candidates

    async def rank(
        self,
        index: SimilarityIndex,
        results: Sequence[SearchResult],
        query_hash: str,
        context_tag: Optional[str] = None,
    ) -> List[ScoredCandidate]:
        """Fetch whole-index account counts from ``index`` and fuse ``results``."""

        accounts = await index.unique_accounts()
        candidates = self.fuse(results, query_hash, accounts, context_tag)
        logger.debug("Scored %d images into %d accounts", len(results), len(candidates))
        return candidates
