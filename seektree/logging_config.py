"""Logging configuration for seektree.

The browser owns the terminal, so log records go to a file instead of stderr.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from platformdirs import user_log_dir

APP_NAME = "seektree"
DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / "seektree.log"


def configure_logging(*, verbose: bool = False, log_path: Path | None = None) -> Path:
    """Route loguru output to ``log_path`` and return the path used."""
    target = log_path or DEFAULT_LOG_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        target,
        level=level,
        rotation="1 MB",
        retention=3,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} {level: <7} {name}:{line} {message}",
    )
    return target
