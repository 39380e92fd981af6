"""Logger factory writing to the rotating application log."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from core.settings import LOGGING, LoggingSettings

ROOT_LOGGER = "taskrank"


def get_logger(name: str = "", *, settings: Optional[LoggingSettings] = None) -> logging.Logger:
    cfg = settings or LOGGING
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        Path(cfg.path).parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            cfg.path,
            maxBytes=cfg.max_bytes,
            backupCount=cfg.backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(cfg.format))
        root.addHandler(handler)
        root.setLevel(logging.INFO)
    if not name:
        return root
    return root.getChild(name)


def enable_console(level: int = logging.DEBUG) -> None:
    """Mirror log records to stderr, used by the CLI ``--verbose`` flag."""

    root = get_logger()
    for handler in root.handlers:
        if getattr(handler, "_taskrank_console", False):
            handler.setLevel(level)
            break
    else:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(LOGGING.format))
        console.setLevel(level)
        console._taskrank_console = True  # type: ignore[attr-defined]
        root.addHandler(console)
    root.setLevel(level)


__all__ = ["ROOT_LOGGER", "enable_console", "get_logger"]
