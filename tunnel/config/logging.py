"""Logging configuration."""

from __future__ import annotations

import os

ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_LOG_FORMAT = "LOG_FORMAT"
ENV_SHOW_LIBRARY_LOGS = "SHOW_LIBRARY_LOGS"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

LOG_LEVEL: str = (os.getenv(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL).strip().upper()
LOG_FORMAT: str = os.getenv(ENV_LOG_FORMAT) or DEFAULT_LOG_FORMAT

# Kept at WARNING unless SHOW_LIBRARY_LOGS is set.
NOISY_LOGGERS = ("websockets", "httpx", "httpcore", "uvicorn.access")

__all__ = [
    "ENV_LOG_LEVEL",
    "ENV_LOG_FORMAT",
    "ENV_SHOW_LIBRARY_LOGS",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_LOG_FORMAT",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "NOISY_LOGGERS",
]
