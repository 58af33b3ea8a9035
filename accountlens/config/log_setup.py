# Path: accountlens/config/log_setup.py
# Purpose: Configure console logging for scripts and embedding applications.
# Layer: config.
# Details: Library modules only create module loggers; handlers are installed here on request.

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a console handler to the ``accountlens`` logger and set its level."""

    logger = logging.getLogger("accountlens")
    logger.setLevel(level.upper())

    if not any(getattr(handler, "_accountlens", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._accountlens = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
