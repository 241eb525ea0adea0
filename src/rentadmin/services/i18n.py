"""
Localization helpers for the ES/EN admin UI and status labels.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


LOGGER = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = ("es", "en")
DEFAULT_LANGUAGE = "es"

_I18N_DIR = Path(__file__).resolve().parent.parent / "dashboard" / "i18n"

# Canonical status order per entity; the UI offers exactly these.
STATUS_CHOICES: Dict[str, Tuple[str, ...]] = {
    "listings": ("draft", "published", "reserved", "rented"),
    "leads": ("new", "contacted", "converted", "discarded"),
    "partners": ("active", "inactive", "pending"),
}


def normalize_language(lang: Optional[str]) -> str:
    value = (lang or "").strip().lower()
    if value in SUPPORTED_LANGUAGES:
        return value
    if value.startswith("es"):
        return "es"
    if value.startswith("en"):
        return "en"
    return DEFAULT_LANGUAGE


@lru_cache(maxsize=8)
def load_dictionary(lang: str) -> Dict[str, Any]:
    normalized = normalize_language(lang)
    path = _I18N_DIR / f"{normalized}.json"
    if not path.exists():
        LOGGER.warning("i18n dictionary not found for lang=%s at %s", normalized, path)
        return {}
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        LOGGER.warning("failed to load i18n dictionary lang=%s: %s", normalized, exc)
        return {}


def get_dictionary(lang: Optional[str]) -> Dict[str, Any]:
    return load_dictionary(normalize_language(lang))


def _lookup_key(data: Dict[str, Any], key: str) -> Any:
    if not isinstance(data, dict):
        return None
    node: Any = data
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


def translate(
    key: str,
    lang: Optional[str] = None,
    default: Optional[str] = None,
    **vars: Any,
) -> str:
    normalized = normalize_language(lang)
    value = _lookup_key(get_dictionary(normalized), key)
    if value is None and normalized != DEFAULT_LANGUAGE:
        value = _lookup_key(get_dictionary(DEFAULT_LANGUAGE), key)
    if not isinstance(value, str):
        value = default if default is not None else key

    if vars:
        try:
            value = value.format(**vars)
        except (KeyError, IndexError):
            # Keep untranslated value if template variables mismatch.
            pass
    return value


def detect_accept_language(header_value: Optional[str]) -> str:
    raw = (header_value or "").lower()
    if not raw:
        return DEFAULT_LANGUAGE
    # First listed language wins; weights are not worth parsing here.
    first = raw.split(",")[0].split(";")[0].strip()
    return normalize_language(first)


def get_language(session_obj=None, request_obj=None, default: Optional[str] = None) -> str:
    if session_obj is not None:
        candidate = (session_obj.get("ui_lang") or "").strip().lower()
        if candidate in SUPPORTED_LANGUAGES:
            return candidate

    if request_obj is not None and request_obj.headers.get("Accept-Language"):
        return detect_accept_language(request_obj.headers.get("Accept-Language"))

    return normalize_language(default)


def status_label(entity: str, status: Optional[str], lang: Optional[str] = None) -> str:
    """Human label for a status value; unknown values are shown as-is."""
    if not status:
        return ""
    return translate(f"status.{entity}.{status}", lang, default=status)


def status_options(entity: str, lang: Optional[str] = None) -> List[Tuple[str, str]]:
    """(value, label) pairs for a status selector"""
    return [(value, status_label(entity, value, lang)) for value in STATUS_CHOICES.get(entity, ())]


def flatten_keys(node: Any, prefix: str = "") -> set:
    """All dotted keys of a nested dictionary, including intermediate ones."""
    keys = set()
    if isinstance(node, dict):
        for key, value in node.items():
            full = f"{prefix}.{key}" if prefix else key
            keys.add(full)
            keys.update(flatten_keys(value, full))
    return keys


def missing_keys(lang: str, reference: str = DEFAULT_LANGUAGE) -> List[str]:
    """Keys present in the reference dictionary but not in `lang`."""
    return sorted(flatten_keys(get_dictionary(reference)) - flatten_keys(get_dictionary(lang)))
