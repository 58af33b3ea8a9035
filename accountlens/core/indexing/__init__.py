# Path: accountlens/core/indexing/__init__.py
# Purpose: Package initializer for indexing utilities.
# Layer: core/indexing.
# Details: Exposes folder scanning and batch registration helpers.

from .scanner import SUPPORTED_EXTENSIONS, ImageScanner
from .batch_register import BatchFailure, BatchRegistrar, BatchResult

__all__ = ["SUPPORTED_EXTENSIONS", "ImageScanner", "BatchFailure", "BatchRegistrar", "BatchResult"]
