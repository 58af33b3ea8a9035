# Path: accountlens/core/vector_store/__init__.py
# Purpose: Package initializer for record stores and the similarity index.
# Layer: core/vector_store.
# Details: Exposes the store contract, its in-memory and SQLite backends, and the async index.

from .base import RecordStore
from .index import SimilarityIndex, cosine_similarity
from .memory_store import MemoryRecordStore
from .sqlite_store import SqliteRecordStore

__all__ = ["RecordStore", "MemoryRecordStore", "SqliteRecordStore", "SimilarityIndex", "cosine_similarity"]
