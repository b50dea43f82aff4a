from __future__ import annotations

import logging
import os
import yaml
from pathlib import Path
from typing import Dict, Any

logger = logging.getLogger("klonch.config")

DEFAULT_CONFIG_PATH = Path.home() / ".klonch_config.yaml"
DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / "klonch"
DEFAULT_DB_NAME = "klonch.db"
DEFAULT_UNDO_LIMIT = 50
DEFAULT_VIEW = "all"
VIEW_CHOICES = ("all", "active", "recent")
DEFAULT_LOG_LEVEL = "WARNING"


def config_path() -> Path:
    override = os.getenv("KLONCH_CONFIG", "").strip()
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH


def _load_config() -> Dict[str, Any]:
    path = config_path()
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("ignoring unreadable config %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring config %s: expected a mapping", path)
        return {}
    return data


def _save_config(data: Dict[str, Any]) -> None:
    path = config_path()
    if not data:
        if path.exists():
            path.unlink()
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")


def _set_value(key: str, value: str) -> None:
    data = _load_config()
    value = (value or "").strip()
    if value:
        data[key] = value
    else:
        data.pop(key, None)
    _save_config(data)


def get_user_lang() -> str:
    return str(_load_config().get("lang", "") or "").strip()


def set_user_lang(value: str) -> None:
    _set_value("lang", value)


def get_user_theme() -> str:
    return str(_load_config().get("theme", "") or "").strip()


def set_user_theme(value: str) -> None:
    _set_value("theme", value)


def get_data_dir() -> Path:
    return DEFAULT_DATA_DIR


def get_db_path() -> Path:
    """Database location: KLONCH_DB, then `db_path` from config, then the data dir."""
    override = os.getenv("KLONCH_DB", "").strip()
    if override:
        return Path(override).expanduser()
    configured = str(_load_config().get("db_path", "") or "").strip()
    if configured:
        return Path(configured).expanduser()
    return get_data_dir() / DEFAULT_DB_NAME


def get_undo_limit() -> int:
    raw = _load_config().get("undo_limit", DEFAULT_UNDO_LIMIT)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("invalid undo_limit %r, using %d", raw, DEFAULT_UNDO_LIMIT)
        return DEFAULT_UNDO_LIMIT
    return value if value > 0 else DEFAULT_UNDO_LIMIT


def get_default_view() -> str:
    value = str(_load_config().get("default_view", DEFAULT_VIEW) or DEFAULT_VIEW).strip().lower()
    if value not in VIEW_CHOICES:
        logger.warning("invalid default_view %r, using %s", value, DEFAULT_VIEW)
        return DEFAULT_VIEW
    return value


def get_log_level() -> str:
    if os.getenv("KLONCH_DEBUG", "").strip() in ("1", "true", "yes"):
        return "DEBUG"
    return str(_load_config().get("log_level", DEFAULT_LOG_LEVEL) or DEFAULT_LOG_LEVEL).strip().upper()
