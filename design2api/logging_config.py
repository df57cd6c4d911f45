"""Unified logging configuration for the design2api service."""
from __future__ import annotations

import logging
import os
from pathlib import Path

# Log directory - configurable via LOG_DIR env var for Docker
LOG_DIR = Path(os.getenv("LOG_DIR", str(Path.cwd() / "logs")))

# Prevent duplicate handlers
_configured_loggers: set[str] = set()


def setup_logger(name: str, filename: str) -> logging.Logger:
    """Setup a logger with file and console handlers.

    Args:
        name: Logger name (e.g., 'design2api', 'api')
        filename: Log file name (e.g., 'design2api.log')

    Returns:
        Configured logger instance
    """
    if name in _configured_loggers:
        return logging.getLogger(name)

    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    logger.propagate = False  # Prevent duplicate logs

    LOG_DIR.mkdir(parents=True, exist_ok=True)

    # File handler
    fh = logging.FileHandler(LOG_DIR / filename, encoding="utf-8")
    fh.setLevel(logging.INFO)
    fh.setFormatter(logging.Formatter(
        "%(asctime)s [%(name)s] [%(levelname)s] %(message)s"
    ))

    # Console handler
    sh = logging.StreamHandler()
    sh.setLevel(logging.INFO)
    sh.setFormatter(logging.Formatter(
        "%(asctime)s [%(name)s] %(message)s"
    ))

    logger.addHandler(fh)
    logger.addHandler(sh)

    _configured_loggers.add(name)
    return logger


def get_app_logger() -> logging.Logger:
    """Root logger for the whole design2api.* tree (pipeline, clients, routes)."""
    return setup_logger("design2api", "design2api.log")
