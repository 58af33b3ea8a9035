# Path: accountlens/core/models/__init__.py
# Purpose: Package initializer for domain model definitions.
# Layer: core/models.
# Details: Exposes dataclasses used across hashing, indexing, scoring, and search layers.

from .domain import (
    AccountSummary,
    ComponentScores,
    EngineStats,
    ImageRecord,
    MatchedImage,
    NewImageRecord,
    ScoredCandidate,
    SearchProgress,
    SearchResult,
    SearchStatus,
)

__all__ = [
    "AccountSummary",
    "ComponentScores",
    "EngineStats",
    "ImageRecord",
    "MatchedImage",
    "NewImageRecord",
    "ScoredCandidate",
    "SearchProgress",
    "SearchResult",
    "SearchStatus",
]
