# Path: accountlens/core/errors.py
# Purpose: Define the error taxonomy raised by the similarity engine.
# Layer: core.
# Details: Every failure aborts the calling search/register; an empty corpus is a result, not an error.

from __future__ import annotations


class AccountLensError(Exception):
    """Root of all engine errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class EmbeddingUnavailable(AccountLensError):
    """The embedding provider failed to load or to produce a vector."""


class StoreUnavailable(AccountLensError):
    """The persistence layer failed to initialize or an I/O operation failed."""


class DimensionMismatch(AccountLensError):
    """An embedding length differs from the index's established dimensionality."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Embedding dimensionality {actual} does not match index dimension {expected}.")


__all__ = ["AccountLensError", "DimensionMismatch", "EmbeddingUnavailable", "StoreUnavailable"]
