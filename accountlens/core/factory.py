# Path: accountlens/core/factory.py
# Purpose: Wire embedder, record store, index, scoring, and orchestrator from settings.
# Layer: core.
# Details: Single entry point used by scripts and embedding applications.

from __future__ import annotations

from typing import Optional

from accountlens.config.settings import AppSettings, EmbedderSettings
from accountlens.core.embedders import ClipEmbedder, Embedder, PixelEmbedder
from accountlens.core.search.orchestrator import SearchOrchestrator
from accountlens.core.search.scoring import FusionWeights, ScoringEngine
from accountlens.core.vector_store import MemoryRecordStore, RecordStore, SimilarityIndex, SqliteRecordStore


def create_embedder(settings: EmbedderSettings) -> Embedder:
    """Instantiate the embedder named in ``settings``."""

    if settings.name == "pixel":
        return PixelEmbedder(dim=settings.dim)
    if settings.name == "clip":
        return ClipEmbedder(model_name=settings.model_name, device=settings.device, dim=settings.dim)
    raise ValueError(f"Unknown embedder: {settings.name}")


def create_orchestrator(settings: Optional[AppSettings] = None) -> SearchOrchestrator:
    """Build a SearchOrchestrator with the stack described by ``settings``."""

    settings = settings or AppSettings()

    store: RecordStore
    if settings.vector_store.database_path is None:
        store = MemoryRecordStore()
    else:
        store = SqliteRecordStore(settings.vector_store.database_path)

    dim = settings.embedder.dim if settings.vector_store.enforce_dim else None
    weights = FusionWeights(
        embedding=settings.scoring.embedding_weight,
        hash=settings.scoring.hash_weight,
        metadata=settings.scoring.metadata_weight,
        frequency=settings.scoring.frequency_weight,
    )
    return SearchOrchestrator(
        embedder=create_embedder(settings.embedder),
        index=SimilarityIndex(store, dim=dim),
        scoring=ScoringEngine(weights=weights),
        top_n=settings.top_n,
    )
