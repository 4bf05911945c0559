"""URL detection helpers for captured text."""

import re
from typing import Optional
from urllib.parse import urlsplit

URL_PATTERN = re.compile(
    r"https?://(?:www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
    r"(?:[-a-zA-Z0-9()@:%_+.~#?&/=]*)",
    re.IGNORECASE,
)


def detect_url(text: str) -> Optional[str]:
    """First http(s) URL found in the text, or None."""
    if not text or not isinstance(text, str):
        return None
    match = URL_PATTERN.search(text.strip())
    return match.group(0) if match else None


def is_url(text: str) -> bool:
    """Whether the whole (trimmed) text is a single http(s) URL."""
    if not text or not isinstance(text, str):
        return False
    trimmed = text.strip()
    if not re.match(r"^https?://", trimmed, re.IGNORECASE):
        return False
    match = URL_PATTERN.match(trimmed)
    if not match:
        return False
    return match.group(0) == trimmed or match.group(0) + "/" == trimmed


def ensure_scheme(url: str) -> str:
    """Prefix https:// when the URL has no http(s) scheme."""
    if not url:
        return ""
    trimmed = url.strip()
    if re.match(r"^https?://", trimmed, re.IGNORECASE):
        return trimmed
    return "https://" + trimmed


def get_hostname(url: str) -> str:
    """Hostname without a leading www., or "" if the URL cannot be parsed."""
    try:
        hostname = urlsplit(ensure_scheme(url)).hostname or ""
    except ValueError:
        return ""
    return hostname[4:] if hostname.startswith("www.") else hostname


def is_from_domain(url: str, domain: str) -> bool:
    return bool(domain) and domain.lower() in get_hostname(url)
