"""Logging configuration: the TUI owns the terminal, so records go to a file."""

import logging
from pathlib import Path
from typing import Optional

from config import get_data_dir, get_log_level

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_FILE_NAME = "klonch.log"


def setup_logging(log_dir: Optional[Path] = None, level: Optional[str] = None) -> Optional[Path]:
    """Attach a file handler to the `klonch` logger; returns the log path, or None if unwritable."""
    root = logging.getLogger("klonch")
    root.setLevel(getattr(logging, (level or get_log_level()).upper(), logging.WARNING))
    root.propagate = False
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    target_dir = log_dir or get_data_dir()
    path = target_dir / LOG_FILE_NAME
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(path, encoding="utf-8")
    except OSError:
        root.addHandler(logging.NullHandler())
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    return path


__all__ = ["setup_logging", "LOG_FILE_NAME"]
