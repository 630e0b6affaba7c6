"""Logging setup for the loader process."""
from __future__ import annotations

import logging
from typing import Optional

_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _ensure_stream_handler(logger: logging.Logger) -> None:
    if any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)


def configure_logging(level_name: Optional[str] = None) -> None:
    """Configure the root logger once; repeated calls only adjust the level."""
    lvl = getattr(logging, (level_name or "INFO").upper(), None)
    if not isinstance(lvl, int):
        lvl = logging.INFO
    root_logger = logging.getLogger()
    root_logger.setLevel(lvl)
    _ensure_stream_handler(root_logger)
