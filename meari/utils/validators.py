"""Shared input validators and sanitizers."""

import re

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_HTML_TAG = re.compile(r"<[^>]*>")
_CONTROL_CHARS = re.compile(r"[\x00-\x1F\x7F-\x9F]")
_STRIPPED_PATTERNS = [
    re.compile(r"javascript:", re.I),
    re.compile(r"data:", re.I),
    re.compile(r"union\s+select", re.I),
    re.compile(r"drop\s+table", re.I),
    re.compile(r"delete\s+from", re.I),
    re.compile(r"insert\s+into", re.I),
    re.compile(r"update\s+set", re.I),
]
_HTML_ENTITIES = [
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#x27;"),
    ("/", "&#x2F;"),
]




def validate_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email)) and 5 <= len(email) <= 320


def validate_password(password: str) -> str | None:
    """Return a rejection message, or None when the password is acceptable."""
    if not password or len(password) < 8:
        return "Password must be at least 8 characters long"
    if not re.search(r"[a-z]", password):
        return "Password must contain at least one lowercase letter"
    if not re.search(r"[A-Z]", password):
        return "Password must contain at least one uppercase letter"
    if not re.search(r"\d", password):
        return "Password must contain at least one number"
    return None


def sanitize_input(value: str) -> str:
    """Strip markup and encode HTML-significant characters."""
    if not value or not isinstance(value, str):
        return ""
    cleaned = _HTML_TAG.sub("", value.strip())
    for char, entity in _HTML_ENTITIES:
        cleaned = cleaned.replace(char, entity)
    cleaned = _CONTROL_CHARS.sub("", cleaned)
    for pattern in _STRIPPED_PATTERNS:
        cleaned = pattern.sub("", cleaned)
    return cleaned
