# Path: accountlens/core/models/domain.py
# Purpose: Define domain models shared across hashing, indexing, scoring, and search workflows.
# Layer: core/models.
# Details: Lightweight dataclasses keep records, search hits, and ranked accounts easy to pass around.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

import numpy as np


@dataclass
class NewImageRecord:
    """Fingerprints and account metadata for an image that has not been stored yet."""

    embedding: np.ndarray
    perceptual_hash: str
    account_name: str
    account_handle: str
    context_tag: Optional[str] = None
    image_url: Optional[str] = None


@dataclass
class ImageRecord:
    """A registered image: its embedding, perceptual hash, and the account it belongs to."""

    id: str
    embedding: np.ndarray
    perceptual_hash: str
    account_name: str
    account_handle: str
    created_at: datetime
    context_tag: Optional[str] = None
    image_url: Optional[str] = None


@dataclass
class SearchResult:
    """One stored record paired with its cosine similarity to the query embedding."""

    record: ImageRecord
    embedding_score: float


@dataclass
class ComponentScores:
    """Per-signal scores of the image that decided an account's total."""

    embedding: float
    hash: float
    metadata: float
    frequency: float


@dataclass
class MatchedImage:
    id: str
    score: float


@dataclass
class ScoredCandidate:
    """A ranked account suggestion aggregated from one or more matched images."""

    account_name: str
    account_handle: str
    scores: ComponentScores
    total_score: float
    matched_images: List[MatchedImage] = field(default_factory=list)
    image_count: int = 0


@dataclass
class AccountSummary:
    """Registration count for one account handle across the whole index."""

    name: str
    handle: str
    count: int


class SearchStatus(str, Enum):
    INITIALIZING = "initializing"
    EXTRACTING_EMBEDDING = "extracting_embedding"
    SEARCHING = "searching"
    SCORING = "scoring"
    DONE = "done"


@dataclass(frozen=True)
class SearchProgress:
    """Progress notification emitted while a search runs."""

    status: SearchStatus
    percent: int
    message: str


@dataclass(frozen=True)
class EngineStats:
    total_images: int
    unique_account_count: int
    embedding_provider_ready: bool
