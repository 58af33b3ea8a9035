# Path: accountlens/core/embedders/base.py
# Purpose: Define the Embedder interface consumed by the similarity engine.
# Layer: core/embedders.
# Details: Adds a lazily-initialized readiness state shared by concurrent first callers.

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

import numpy as np
from PIL import Image

from accountlens.core.errors import EmbeddingUnavailable

logger = logging.getLogger(__name__)


class ProviderState(str, Enum):
    NOT_READY = "not_ready"
    INITIALIZING = "initializing"
    READY = "ready"


class Embedder(ABC):
    """Abstract base class for image embedding providers.

    Subclasses implement the blocking hooks :meth:`_load` and :meth:`embed_image`;
    callers only use the async :meth:`ensure_ready` and :meth:`embed`.
    """

    name: str
    dim: int

    def __init__(self) -> None:
        self._state = ProviderState.NOT_READY
        self._init_task: Optional[asyncio.Future] = None

    @property
    def state(self) -> ProviderState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ProviderState.READY

    async def ensure_ready(self) -> None:
        """Load the provider once; concurrent callers await the same in-flight load."""

        if self._state is ProviderState.READY:
            return
        if self._init_task is None:
            self._state = ProviderState.INITIALIZING
            self._init_task = asyncio.ensure_future(self._initialize())
        await asyncio.shield(self._init_task)

    async def embed(self, image: Image.Image) -> np.ndarray:
        """Return an L2-normalized float32 embedding for ``image``."""

        await self.ensure_ready()
        try:
            vector = await asyncio.to_thread(self.embed_image, image)
        except Exception as exc:
            raise EmbeddingUnavailable(f"{self.name} failed to embed image: {exc}") from exc

        vector = np.asarray(vector, dtype=np.float32).reshape(-1)
        if vector.size == 0 or not np.all(np.isfinite(vector)):
            raise EmbeddingUnavailable(f"{self.name} produced an empty or non-finite embedding.")
        return self._normalize(vector)

    async def _initialize(self) -> None:
        logger.info("Loading embedder %s", self.name)
        try:
            await asyncio.to_thread(self._load)
        except asyncio.CancelledError:
            self._state = ProviderState.NOT_READY
            self._init_task = None
            raise
        except Exception as exc:
            self._state = ProviderState.NOT_READY
            self._init_task = None
            logger.error("Embedder %s failed to load: %s", self.name, exc)
            raise EmbeddingUnavailable(f"{self.name} failed to initialize: {exc}") from exc
        self._state = ProviderState.READY
        logger.info("Embedder %s ready (dim=%d)", self.name, self.dim)

    def _load(self) -> None:
        """Perform one-time, possibly expensive setup. Runs in a worker thread."""

    @abstractmethod
    def embed_image(self, image: Image.Image) -> np.ndarray:
        """Return an embedding for a given image. Runs in a worker thread."""

    @staticmethod
    def _normalize(vector: np.ndarray) -> np.ndarray:
        """Normalize embedding vectors to unit length to simplify similarity comparisons."""

        norm = np.linalg.norm(vector)
        if norm == 0:
            return vector.astype(np.float32)
        return (vector / norm).astype(np.float32)
