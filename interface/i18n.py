"""Status and label strings: language resolution over LANG_PACK."""

import logging
import os
from typing import Optional, Set

from config import get_user_lang
from interface.constants import LANG_PACK

logger = logging.getLogger("klonch.i18n")

BASE_LANG = "en"

_reported_missing: Set[str] = set()


def _backfill_from_base() -> None:
    """Partial packs inherit every string they lack from the base language."""
    base = LANG_PACK[BASE_LANG]
    for lang, values in LANG_PACK.items():
        if lang != BASE_LANG:
            for key, text in base.items():
                values.setdefault(key, text)


_backfill_from_base()


def normalize_lang(value: Optional[str]) -> str:
    """Map "ru", "RU", "ru_RU.UTF-8" or "ru-RU" to a pack name; "" when unsupported."""
    code = (value or "").strip().lower()
    code = code.split(".", 1)[0].replace("-", "_").split("_", 1)[0]
    return code if code in LANG_PACK else ""


def effective_lang(preferred: Optional[str] = None) -> str:
    """KLONCH_LANG, then English under pytest, then `preferred` or config `lang`."""
    env_lang = normalize_lang(os.getenv("KLONCH_LANG"))
    if env_lang:
        return env_lang
    if os.getenv("PYTEST_CURRENT_TEST"):
        return BASE_LANG
    return normalize_lang(preferred or get_user_lang()) or BASE_LANG


def translate(message_id: str, lang: Optional[str] = None, **kwargs) -> str:
    """Format the string for `message_id`; unknown ids come back verbatim."""
    lang_map = LANG_PACK[effective_lang(lang)]
    template = lang_map.get(message_id)
    if template is None:
        if message_id not in _reported_missing:
            _reported_missing.add(message_id)
            logger.debug("no string for %s", message_id)
        return message_id
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError, ValueError) as exc:
        logger.debug("bad arguments for %s: %s", message_id, exc)
        return template


__all__ = ["BASE_LANG", "effective_lang", "normalize_lang", "translate"]
