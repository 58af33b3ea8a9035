# Path: accountlens/core/embedders/pixel_embedder.py
# Purpose: Provide a lightweight deterministic embedder that needs no model download.
# Layer: core/embedders.
# Details: Projects downsampled pixels through a seeded Gaussian matrix as a stand-in for CLIP.

from __future__ import annotations

from typing import Optional

import numpy as np
from PIL import Image

from .base import Embedder


class PixelEmbedder(Embedder):
    """Deterministic embedder built from pixel content.

    Identical pixels always map to the identical vector, and visually close
    images map to nearby vectors, which is enough for local use and tests.
    """

    def __init__(self, dim: int = 512, grid_size: int = 16, seed: int = 0) -> None:
        super().__init__()
        self.name = "pixel"
        self.dim = dim
        self.grid_size = grid_size
        self.seed = seed
        self._projection: Optional[np.ndarray] = None

    def _load(self) -> None:
        # Centered pixels plus one brightness term.
        features = self.grid_size * self.grid_size * 3 + 1
        rng = np.random.default_rng(self.seed)
        self._projection = rng.standard_normal((features, self.dim)).astype(np.float32)

    def embed_image(self, image: Image.Image) -> np.ndarray:
        if self._projection is None:
            raise RuntimeError("PixelEmbedder.embed_image called before the projection was loaded.")

        resized = image.convert("RGB").resize((self.grid_size, self.grid_size), Image.Resampling.BILINEAR)
        pixels = np.asarray(resized, dtype=np.float32).flatten() / 255.0
        features = np.append(pixels - pixels.mean(), pixels.mean()).astype(np.float32)
        return self._normalize(features @ self._projection)
