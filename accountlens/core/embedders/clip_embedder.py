# Path: accountlens/core/embedders/clip_embedder.py
# Purpose: Provide a CLIP image embedder backed by Hugging Face transformers.
# Layer: core/embedders.
# Details: The model is downloaded and loaded on first use; requires the optional ``clip`` extra.

from __future__ import annotations

from typing import Any, Optional

import numpy as np
from PIL import Image

from .base import Embedder


class ClipEmbedder(Embedder):
    """CLIP ViT image features, L2-normalized."""

    def __init__(self, model_name: str = "openai/clip-vit-base-patch32", device: str = "cpu", dim: int = 512) -> None:
        super().__init__()
        self.model_name = model_name
        self.device = device
        self.dim = dim
        self.name = "clip"
        self._model: Optional[Any] = None
        self._processor: Optional[Any] = None

    def _load(self) -> None:
        try:
            from transformers import CLIPModel, CLIPProcessor  # type: ignore[import]
        except ImportError as exc:  # pragma: no cover - runtime dependency
            raise RuntimeError("transformers and torch are required for the clip embedder (pip install accountlens[clip]).") from exc

        model = CLIPModel.from_pretrained(self.model_name)
        model.to(self.device)
        model.eval()
        self._processor = CLIPProcessor.from_pretrained(self.model_name)
        self._model = model

    def embed_image(self, image: Image.Image) -> np.ndarray:
        if self._model is None or self._processor is None:
            raise RuntimeError("ClipEmbedder.embed_image called before the model was loaded.")

        import torch  # type: ignore[import]

        inputs = self._processor(images=image.convert("RGB"), return_tensors="pt")
        inputs = {key: value.to(self.device) for key, value in inputs.items()}
        with torch.no_grad():
            features = self._model.get_image_features(**inputs)
        features = features / features.norm(dim=-1, keepdim=True)
        return features.cpu().numpy().flatten()
