# Path: accountlens/__init__.py
# Purpose: Package initializer for the AccountLens similarity engine.
# Layer: root.
# Details: Re-exports the orchestrator factory and settings used by callers.

from accountlens.config import AppSettings, configure_logging
from accountlens.core.factory import create_orchestrator
from accountlens.core.search.orchestrator import SearchOrchestrator

__version__ = "0.1.0"

__all__ = ["AppSettings", "SearchOrchestrator", "configure_logging", "create_orchestrator", "__version__"]
