# Path: accountlens/core/hashing/phash.py
# Purpose: Compute 64-bit perceptual hashes and compare them by Hamming distance.
# Layer: core/hashing.
# Details: DCT-based pHash computed in-engine with numpy; no external hashing package involved.

from __future__ import annotations

from itertools import zip_longest
from typing import Union

import numpy as np
from PIL import Image

ImageInput = Union[Image.Image, np.ndarray]

HASH_BITS = 64
HASH_HEX_LENGTH = HASH_BITS // 4
SAMPLE_SIZE = 32
LOW_FREQ_SIZE = 8
LUMINANCE_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _dct_matrix(size: int) -> np.ndarray:
    """Return the orthonormal DCT-II basis so that ``M @ X @ M.T`` is the 2-D transform."""

    k = np.arange(size).reshape(-1, 1)
    n = np.arange(size).reshape(1, -1)
    matrix = np.sqrt(2.0 / size) * np.cos((2 * n + 1) * k * np.pi / (2 * size))
    matrix[0, :] /= np.sqrt(2.0)
    return matrix


_DCT_32 = _dct_matrix(SAMPLE_SIZE)


class PerceptualHasher:
    """DCT perceptual hash producing 16-character hex fingerprints.

    The hash keeps the 63 lowest non-DC frequencies of a 32x32 grayscale
    thumbnail, thresholds them at their median, and pads one trailing zero
    bit to reach 64 bits.
    """

    def hash(self, image: ImageInput) -> str:
        """Return the 64-bit perceptual hash of ``image`` as lowercase hex."""

        gray = self._grayscale_thumbnail(image)
        coefficients = _DCT_32 @ gray @ _DCT_32.T

        low_freq = coefficients[:LOW_FREQ_SIZE, :LOW_FREQ_SIZE].flatten()[1:]
        median = np.median(low_freq)
        bits = "".join("1" if value > median else "0" for value in low_freq)
        bits = bits.ljust(HASH_BITS, "0")
        return f"{int(bits, 2):0{HASH_HEX_LENGTH}x}"

    @staticmethod
    def distance(hash1: str, hash2: str) -> int:
        """Count differing bit positions; positions missing from the shorter hash count as 0."""

        bits1 = _hex_to_bits(hash1)
        bits2 = _hex_to_bits(hash2)
        return sum(1 for a, b in zip_longest(bits1, bits2, fillvalue="0") if a != b)

    @classmethod
    def similarity(cls, hash1: str, hash2: str) -> float:
        """Return ``1 - distance / 64``; 1.0 only for identical hashes."""

        return 1.0 - cls.distance(hash1, hash2) / HASH_BITS

    @staticmethod
    def is_valid(value: str) -> bool:
        return isinstance(value, str) and len(value) == HASH_HEX_LENGTH and all(c in _HEX_DIGITS for c in value)

    @staticmethod
    def _grayscale_thumbnail(image: ImageInput) -> np.ndarray:
        if isinstance(image, np.ndarray):
            if image.dtype != np.uint8:
                raise ValueError(f"Pixel arrays must be uint8 in [0, 255], got dtype {image.dtype}.")
            image = Image.fromarray(np.ascontiguousarray(image))
        resized = image.convert("RGB").resize((SAMPLE_SIZE, SAMPLE_SIZE), Image.Resampling.BILINEAR)
        pixels = np.asarray(resized, dtype=np.float64)
        return pixels @ LUMINANCE_WEIGHTS


def _hex_to_bits(value: str) -> str:
    if not all(char in _HEX_DIGITS for char in value):
        raise ValueError(f"Perceptual hash {value!r} is not a hexadecimal string.")
    return "".join(format(int(char, 16), "04b") for char in value)
