# Path: accountlens/core/embedders/__init__.py
# Purpose: Package initializer for embedder implementations and interfaces.
# Layer: core/embedders.
# Details: Exposes the base interface, its readiness states, and the bundled implementations.

from .base import Embedder, ProviderState
from .clip_embedder import ClipEmbedder
from .pixel_embedder import PixelEmbedder

__all__ = ["Embedder", "ProviderState", "ClipEmbedder", "PixelEmbedder"]
