"""Centralized application configuration."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import os
import sys


def get_default_data_dir(
    app_name: str,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return an OS-specific user data directory for ``app_name``."""

    platform_id = (platform or sys.platform).lower()
    environ = dict(os.environ if env is None else env)
    override = environ.get("TASKRANK_DATA_DIR")
    if override:
        return Path(override).expanduser()

    home_dir = Path(home or Path.home())
    sanitized = app_name.strip() or "app"
    sanitized = sanitized.replace("/", "-").replace("\\", "-")

    if platform_id.startswith("win"):
        base = Path(environ.get("APPDATA") or home_dir / "AppData" / "Roaming")
    elif platform_id == "darwin":
        base = Path(environ.get("APPDATA") or home_dir / "Library" / "Application Support")
    else:
        base = Path(environ.get("XDG_DATA_HOME") or home_dir / ".local" / "share")

    return (base.expanduser() / sanitized)


APP_NAME = "Taskrank"


DATA_DIR = get_default_data_dir(APP_NAME)
LOG_DIR = DATA_DIR / "logs"

for _dir in (DATA_DIR, LOG_DIR):
    _dir.mkdir(parents=True, exist_ok=True)


DB_PATH = DATA_DIR / "tasks.db"
CONFIG_PATH = DATA_DIR / "config.json"
LOG_PATH = LOG_DIR / "taskrank.log"


@dataclass(frozen=True)
class PrioritySettings:
    # Deadline buckets are inclusive upper bounds in whole days.
    high_deadline_days: int = 1
    medium_deadline_days: int = 3
    base_score: int = 1
    high_deadline_points: int = 4
    medium_deadline_points: int = 2
    high_effort_points: int = 3
    medium_effort_points: int = 2
    any_high_bonus: int = 3
    both_medium_bonus: int = 2
    any_medium_bonus: int = 1
    min_score: int = 1
    max_score: int = 10


PRIORITY = PrioritySettings()


@dataclass(frozen=True)
class ImportSettings:
    batch_size: int = 10
    effort_label_prefix: str = "EFFORT:"
    effort_vocabulary: tuple[str, ...] = ("EASY", "MEDIUM", "HARD", "SHORT", "LONG")
    short_effort_words: tuple[str, ...] = ("EASY", "SHORT")
    long_effort_words: tuple[str, ...] = ("HARD", "LONG")
    default_effort: str = "MEDIUM"
    long_checklist_threshold: int = 2
    default_due_hours: int = 24
    untitled_name: str = "Untitled Task"


IMPORT = ImportSettings()


@dataclass(frozen=True)
class TrelloSettings:
    api_base: str = "https://api.trello.com/1"
    card_fields: tuple[str, ...] = ("name", "desc", "due", "dueComplete", "labels", "idChecklists")
    timeout_sec: float = 15.0
    api_key_env: str = "TRELLO_API_KEY"
    token_env: str = "TRELLO_TOKEN"


TRELLO = TrelloSettings()


@dataclass(frozen=True)
class LoggingSettings:
    path: Path = LOG_PATH
    max_bytes: int = 1_000_000
    backup_count: int = 3
    format: str = "%(asctime)s [%(levelname)s] %(message)s"


LOGGING = LoggingSettings()


__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "LOG_DIR",
    "DB_PATH",
    "CONFIG_PATH",
    "LOG_PATH",
    "PRIORITY",
    "IMPORT",
    "TRELLO",
    "LOGGING",
    "PrioritySettings",
    "ImportSettings",
    "TrelloSettings",
    "LoggingSettings",
    "get_default_data_dir",
]
