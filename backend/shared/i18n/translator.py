"""
Tiered message lookup over JSON catalogs.

A key is a dotted path into the nested catalog (``errors.not_found.table``).
Lookup tries the requested locale, then Thai, then English, and finally
returns the key itself so a missing entry never breaks a response.
Placeholders use the ``{{name}}`` form shared with the web clients.
"""

import json
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

from shared.config.settings import settings

MESSAGES_DIR = Path(__file__).parent / "messages"

SUPPORTED_LOCALES = ("th", "en")
FALLBACK_LOCALES = ("th", "en")

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


@lru_cache
def load_catalog(locale: str) -> dict[str, Any]:
    """Load and cache one locale's catalog. Unknown locales load as empty."""
    path = MESSAGES_DIR / f"{locale}.json"
    if not path.is_file():
        return {}
    with path.open(encoding="utf-8") as fh:
        return json.load(fh)


def _lookup(catalog: dict[str, Any], key: str) -> str | None:
    node: Any = catalog
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


def _interpolate(template: str, params: dict[str, Any]) -> str:
    def replace(match: re.Match) -> str:
        name = match.group(1)
        if name in params and params[name] is not None:
            return str(params[name])
        return match.group(0)

    return _PLACEHOLDER.sub(replace, template)


def translate(key: str, locale: str | None = None, **params: Any) -> str:
    """
    Resolve a message key for a locale.

    Args:
        key: Dotted catalog key.
        locale: Preferred locale; defaults to settings.default_locale.
        **params: Values for ``{{name}}`` placeholders.
    """
    chain = [locale or settings.default_locale]
    chain.extend(loc for loc in FALLBACK_LOCALES if loc not in chain)

    for loc in chain:
        message = _lookup(load_catalog(loc), key)
        if message is not None:
            return _interpolate(message, params)
    return key


def resolve_locale(accept_language: str | None) -> str:
    """
    Pick the first supported language from an Accept-Language header.

    Quality values are honoured; region subtags are ignored (``en-US`` -> ``en``).
    """
    if not accept_language:
        return settings.default_locale

    candidates: list[tuple[float, int, str]] = []
    for index, part in enumerate(accept_language.split(",")):
        piece = part.strip()
        if not piece:
            continue
        lang, _, params = piece.partition(";")
        quality = 1.0
        if params.strip().startswith("q="):
            try:
                quality = float(params.strip()[2:])
            except ValueError:
                quality = 0.0
        candidates.append((-quality, index, lang.strip().lower().split("-")[0]))

    for _, _, lang in sorted(candidates):
        if lang in SUPPORTED_LOCALES:
            return lang
    return settings.default_locale
