"""
Message catalogs for API responses.

Usage:
    from shared.i18n import translate
    translate("errors.not_found.table", "en")
"""

from shared.i18n.translator import (
    FALLBACK_LOCALES,
    SUPPORTED_LOCALES,
    resolve_locale,
    translate,
)

__all__ = ["FALLBACK_LOCALES", "SUPPORTED_LOCALES", "resolve_locale", "translate"]
