# Path: accountlens/config/__init__.py
# Purpose: Package initializer for configuration module.
# Layer: config.
# Details: Exposes settings models and the logging setup helper.

from .log_setup import configure_logging
from .settings import AppSettings, EmbedderSettings, ScoringSettings, VectorStoreSettings

__all__ = ["AppSettings", "EmbedderSettings", "ScoringSettings", "VectorStoreSettings", "configure_logging"]
