"""Logging initialization."""

from __future__ import annotations

import os
import logging

from tunnel.config.logging import LOG_LEVEL, LOG_FORMAT, NOISY_LOGGERS, ENV_SHOW_LIBRARY_LOGS


def configure_logging(level: str | None = None) -> None:
    # websockets/httpx log every frame and request at DEBUG/INFO; keep them tame unless asked.
    if (os.getenv(ENV_SHOW_LIBRARY_LOGS) or "").strip().lower() not in {"1", "true", "yes"}:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=LOG_FORMAT)


__all__ = ["configure_logging"]
