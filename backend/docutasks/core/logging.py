from __future__ import annotations

import logging

from .config import settings

_configured = False


def _ensure_base_logger() -> None:
    global _configured
    if _configured:
        return
    level = settings.LOG_LEVEL.upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    )
    _configured = True


def get_logger(name: str) -> logging.Logger:
    _ensure_base_logger()
    return logging.getLogger(name)
