"""Simple JSON-backed configuration store."""
from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from core.settings import CONFIG_PATH, TRELLO


@dataclass
class AppConfig:
    """Lightweight configuration persisted to ``config.json``."""

    owner_id: Optional[str] = None
    trello_api_key: Optional[str] = None
    trello_token: Optional[str] = None


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _load_raw(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_config(path: Optional[Path] = None) -> AppConfig:
    target = path or CONFIG_PATH
    data = _load_raw(target)
    return AppConfig(
        owner_id=data.get("owner_id") or None,
        trello_api_key=data.get("trello_api_key") or None,
        trello_token=data.get("trello_token") or None,
    )


def with_env_overrides(config: AppConfig, env: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Let ``TRELLO_API_KEY`` / ``TRELLO_TOKEN`` win over the stored values."""

    environ = os.environ if env is None else env
    return replace(
        config,
        trello_api_key=environ.get(TRELLO.api_key_env) or config.trello_api_key,
        trello_token=environ.get(TRELLO.token_env) or config.trello_token,
    )


def save_config(config: AppConfig, path: Optional[Path] = None) -> None:
    target = path or CONFIG_PATH
    _ensure_parent(target)
    payload = json.dumps(asdict(config), ensure_ascii=False, indent=2, sort_keys=True)
    tmp = target.with_suffix(".tmp")
    try:
        tmp.write_text(payload, encoding="utf-8")
        tmp.replace(target)
    finally:
        if tmp.exists():
            try:
                tmp.unlink()
            except OSError:
                pass


def update_config(path: Optional[Path] = None, **changes: Any) -> AppConfig:
    target = path or CONFIG_PATH
    cfg = load_config(target)
    for key, value in changes.items():
        if hasattr(cfg, key):
            setattr(cfg, key, value)
    save_config(cfg, target)
    return cfg


__all__ = ["AppConfig", "load_config", "save_config", "update_config", "with_env_overrides"]
