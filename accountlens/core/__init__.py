# Path: accountlens/core/__init__.py
# Purpose: Package initializer for core application layer.
# Layer: core.
# Details: Aggregates subpackages for hashing, embedders, record stores, search, indexing, and models.
