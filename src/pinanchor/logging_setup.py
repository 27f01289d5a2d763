from __future__ import annotations

import logging
import os
from pathlib import Path

from .config import CONFIG_DIR

LOGGER_NAME = "pinanchor"
LOG_DIR = CONFIG_DIR / "logs"
LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def _level_from_env() -> int:
    raw = os.environ.get("PINANCHOR_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.INFO


def build_logger(log_dir: Path | None = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(_level_from_env())
    logger.propagate = False
    target_dir = log_dir or LOG_DIR
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(target_dir / "pinanchor.log", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)
    except OSError:
        # Fallback to stderr logging if file logger cannot be initialized.
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(stream_handler)
    return logger
