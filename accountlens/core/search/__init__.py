# Path: accountlens/core/search/__init__.py
# Purpose: Package initializer for scoring and search orchestration.
# Layer: core/search.
# Details: Exposes the scoring engine, its weights and bonus helpers, and the search orchestrator.

from .scoring import FusionWeights, ScoringEngine, frequency_bonus, metadata_bonus
from .orchestrator import DEFAULT_TOP_N, ProgressCallback, SearchOrchestrator

__all__ = [
    "DEFAULT_TOP_N",
    "FusionWeights",
    "ProgressCallback",
    "ScoringEngine",
    "SearchOrchestrator",
    "frequency_bonus",
    "metadata_bonus",
]
