from __future__ import annotations

import logging
import os


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        # WARNING by default: stdout carries the reply, stderr stays quiet.
        level = os.getenv("CLIGPT_LOG_LEVEL", "WARNING").upper()
        logging.basicConfig(level=getattr(logging, level, logging.WARNING), format="%(levelname)s | %(message)s")
    return logger
