"""
Log setup for the affinity cloud.

Everything under `affinities.*` (layout pass, avatar downloads, the API routes)
logs through one namespace logger; uvicorn keeps its own loggers.
"""
import logging
import os
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%H:%M:%S'


def level_from_env(default: int = logging.INFO) -> int:
    """AFFINITIES_LOG_LEVEL as a logging level; unknown names give `default`."""
    name = os.getenv("AFFINITIES_LOG_LEVEL", "").upper()
    level = logging.getLevelName(name) if name else default
    return level if isinstance(level, int) else default


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Route the 'affinities' logger to stdout, and to `log_file` when one is given.

    Tier-4 packer fallbacks only show at DEBUG; failed avatar downloads are
    WARNINGs, one line per avatar.
    """
    logger = logging.getLogger("affinities")
    logger.setLevel(level)

    # uvicorn --reload imports the app again; don't stack handlers
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info("Logging to %s.", log_file or "stdout")
