"""
Shared validators for input sanitization.
"""

import re
from typing import Optional
from urllib.parse import urlparse

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"

BLOCKED_SCHEMES = {"javascript", "data", "file", "ftp"}


def parse_hhmm(value: str) -> int:
    """
    Convert an "HH:MM" string into minutes since midnight.

    Raises:
        ValueError: If the string is not a valid 24h time.
    """
    if not value or not TIME_PATTERN.match(value):
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_hhmm(minutes: int) -> str:
    """Convert minutes since midnight back into "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def validate_image_url(url: Optional[str]) -> Optional[str]:
    """
    Validate an image URL for menu items.

    Only http(s) URLs are accepted; script/data/file schemes are rejected.
    """
    if url is None or url.strip() == "":
        return None

    url = url.strip()
    parsed = urlparse(url)
    scheme = (parsed.scheme or "").lower()

    if scheme in BLOCKED_SCHEMES or scheme not in ("http", "https"):
        raise ValueError("Image URL must use http or https")
    if not parsed.netloc:
        raise ValueError("Image URL must include a host")
    if len(url) > 2048:
        raise ValueError("Image URL too long (max 2048 characters)")

    return url


def escape_like_pattern(value: str) -> str:
    """
    Escape special characters in LIKE patterns.

    SQL LIKE uses % and _ as wildcards; escaping them keeps a search term
    from turning into an unintended pattern.
    """
    if not value:
        return value

    value = value.replace("\\", "\\\\")
    value = value.replace("%", "\\%")
    value = value.replace("_", "\\_")
    return value


def sanitize_search_term(term: str, max_length: int = 100) -> str:
    """Trim, truncate and strip control characters from a search term."""
    if not term:
        return ""

    term = term.strip()
    if len(term) > max_length:
        term = term[:max_length]

    return re.sub(r"[\x00-\x1f\x7f-\x9f]", "", term)


def normalize_phone(phone: str) -> str:
    """Drop spaces, dashes, dots and parentheses so one phone maps to one customer."""
    return re.sub(r"[\s\-().]", "", phone or "")


PHONE_PATTERN = re.compile(r"^\+?\d{10,15}$")


def validate_phone(phone: str) -> str:
    """
    Normalize a phone and check what is left.

    Raises:
        ValueError: Unless 10-15 digits (optionally after a leading +) remain.
    """
    normalized = normalize_phone(phone)
    if not PHONE_PATTERN.match(normalized):
        raise ValueError("Phone must contain 10 to 15 digits")
    return normalized
