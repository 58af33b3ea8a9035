# Path: accountlens/core/hashing/__init__.py
# Purpose: Package initializer for perceptual hashing.
# Layer: core/hashing.
# Details: Exposes the DCT perceptual hasher and its constants.

from .phash import HASH_BITS, HASH_HEX_LENGTH, PerceptualHasher

__all__ = ["HASH_BITS", "HASH_HEX_LENGTH", "PerceptualHasher"]
