"""
Shared validators for input sanitization.

Used from pydantic field validators (raise ValueError) and from routers.
"""

import re
import unicodedata
from typing import Optional

from shared.config.constants import Limits


def validate_relative_url(url: Optional[str]) -> Optional[str]:
    """
    Validate an image or logo URL served by this API.

    Only app-relative paths are accepted ("/uploads/restaurant/x.png").
    Empty strings normalize to None so clients can clear the field.

    Raises:
        ValueError: If the URL is absolute, protocol-relative or escapes
            the upload tree.
    """
    if url is None:
        return None

    url = url.strip()
    if not url:
        return None

    if not url.startswith("/") or url.startswith("//"):
        raise ValueError("URL must be a relative path starting with '/'")

    if ".." in url.split("/"):
        raise ValueError("URL must not contain '..' segments")

    if len(url) > Limits.MAX_URL_LENGTH:
        raise ValueError(f"URL too long (max {Limits.MAX_URL_LENGTH} characters)")

    return url


def escape_like_pattern(value: str) -> str:
    """
    Escape special characters in LIKE patterns.

    SQL LIKE uses % and _ as wildcards; escape them so user input
    matches literally. Pair with ``escape="\\\\"`` on ``ilike``.
    """
    if not value:
        return value

    value = value.replace("\\", "\\\\")
    value = value.replace("%", "\\%")
    value = value.replace("_", "\\_")
    return value


def sanitize_search_term(term: Optional[str], max_length: int = Limits.MAX_SEARCH_TERM_LENGTH) -> str:
    """Trim, truncate and strip control characters from a search term."""
    if not term:
        return ""

    term = term.strip()
    if len(term) > max_length:
        term = term[:max_length]

    return re.sub(r"[\x00-\x1f\x7f-\x9f]", "", term)


def like_contains(term: str) -> str:
    """LIKE pattern matching ``term`` anywhere, wildcards escaped."""
    return f"%{escape_like_pattern(term)}%"


def safe_filename(name: Optional[str], max_length: int = 120) -> str:
    """
    Reduce an uploaded file name to a safe basename.

    Keeps letters (any script), digits, dot, dash and underscore;
    everything else becomes "_". Path components are discarded.
    """
    if not name:
        return "file"

    name = name.replace("\\", "/").split("/")[-1]
    name = unicodedata.normalize("NFC", name)
    name = re.sub(r"[^\w.\-]", "_", name, flags=re.UNICODE)
    name = name.lstrip(".") or "file"
    if len(name) > max_length:
        stem, dot, ext = name.rpartition(".")
        if dot and len(ext) < 10:
            name = stem[: max_length - len(ext) - 1] + "." + ext
        else:
            name = name[:max_length]
    return name
