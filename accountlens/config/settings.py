# Path: accountlens/config/settings.py
# Purpose: Provide typed application configuration models.
# Layer: config.
# Details: Centralizes settings for embedders, the record store, scoring weights, and logging.

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "ACCOUNTLENS_"


class EmbedderSettings(BaseModel):
    """Settings describing which embedder implementation to use and how to load it."""

    name: str = Field(default="pixel", description="Identifier of the embedder implementation (pixel or clip).")
    model_name: str = Field(default="openai/clip-vit-base-patch32", description="Model used by the clip embedder.")
    device: str = Field(default="cpu", description="Target device for model execution.")
    dim: int = Field(default=512, description="Embedding dimensionality produced by the embedder.")


class VectorStoreSettings(BaseModel):
    """Settings controlling record persistence."""

    database_path: Optional[Path] = Field(
        default=Path("storage/db/accountlens.sqlite3"),
        description="SQLite file holding registered images; None keeps records in memory.",
    )
    enforce_dim: bool = Field(default=True, description="Reject embeddings whose length differs from embedder.dim.")


class ScoringSettings(BaseModel):
    """Fusion weights applied to the per-candidate signals."""

    embedding_weight: float = Field(default=0.50, description="Weight of embedding cosine similarity.")
    hash_weight: float = Field(default=0.30, description="Weight of perceptual hash similarity.")
    metadata_weight: float = Field(default=0.15, description="Weight of the context tag bonus.")
    frequency_weight: float = Field(default=0.05, description="Weight of the registration frequency bonus.")


class AppSettings(BaseModel):
    """Top-level application settings shared across services and scripts."""

    top_n: int = Field(default=50, ge=1, description="Number of embedding hits scored per search.")
    log_level: str = Field(default="INFO", description="Verbosity level for application logs.")
    embedder: EmbedderSettings = Field(default_factory=EmbedderSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppSettings":
        """Instantiate settings, applying ``ACCOUNTLENS_*`` environment overrides when present."""

        environ = os.environ if environ is None else environ
        payload: Dict[str, Any] = {}
        nested: Dict[str, Dict[str, Any]] = {"embedder": {}, "vector_store": {}, "scoring": {}}

        def read(name: str) -> Optional[str]:
            return environ.get(f"{ENV_PREFIX}{name}")

        if read("TOP_N") is not None:
            payload["top_n"] = read("TOP_N")
        if read("LOG_LEVEL") is not None:
            payload["log_level"] = read("LOG_LEVEL")
        if read("EMBEDDER") is not None:
            nested["embedder"]["name"] = read("EMBEDDER")
        if read("MODEL_NAME") is not None:
            nested["embedder"]["model_name"] = read("MODEL_NAME")
        if read("DEVICE") is not None:
            nested["embedder"]["device"] = read("DEVICE")
        if read("DIM") is not None:
            nested["embedder"]["dim"] = read("DIM")
        database_path = read("DATABASE_PATH")
        if database_path is not None:
            # An empty value selects the in-memory store.
            nested["vector_store"]["database_path"] = database_path or None

        for key, value in nested.items():
            if value:
                payload[key] = value
        return cls.model_validate(payload)

    @classmethod
    def from_file(cls, path: Path | str) -> "AppSettings":
        """Load settings from a JSON file; missing keys keep their defaults."""

        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.model_validate(payload)

    def save(self, path: Path | str) -> None:
        """Persist the settings as JSON."""

        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")


__all__ = ["AppSettings", "EmbedderSettings", "ScoringSettings", "VectorStoreSettings"]
