"""Logging setup shared by the API and scripts."""

from __future__ import annotations

import logging
import os
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: Optional[str] = None, *, include_uvicorn: bool = True) -> logging.Logger:
    """Configure root logging and return the ``pitch_league`` logger.

    ``level`` falls back to ``PITCH_LEAGUE_LOG_LEVEL`` and then INFO.
    """

    resolved = (level or os.getenv("PITCH_LEAGUE_LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(level=resolved, format=DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)

    app_logger = logging.getLogger("pitch_league")
    app_logger.setLevel(resolved)

    if include_uvicorn:
        for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
            logging.getLogger(name).setLevel(resolved)

    app_logger.debug("Logging configured at %s", resolved)
    return app_logger


__all__ = ["configure_logging"]
