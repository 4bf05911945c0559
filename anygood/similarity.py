"""
String and URL similarity.

Edit distance is computed with the classic dynamic programming recurrence
(insert, delete and substitute all cost 1), keeping only two rows of the
table at a time.
"""

from urllib.parse import urlsplit


def levenshtein(a: str, b: str) -> int:
    """Edit distance between two strings."""
    if not a:
        return len(b)
    if not b:
        return len(a)

    # Rows run over b, columns over a
    previous = list(range(len(a) + 1))
    for i, char_b in enumerate(b, start=1):
        current = [i] + [0] * len(a)
        for j, char_a in enumerate(a, start=1):
            if char_a == char_b:
                current[j] = previous[j - 1]
            else:
                current[j] = min(
                    previous[j - 1] + 1,  # substitute
                    current[j - 1] + 1,   # insert
                    previous[j] + 1,      # delete
                )
        previous = current

    return previous[len(a)]


def string_similarity(a: str, b: str) -> float:
    """
    Levenshtein distance normalized to [0, 1].

    Equal to (longer - distance) / longer; two empty strings are identical.
    """
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return 1.0 - levenshtein(a, b) / max_len


def normalize_url(url: str) -> str:
    """
    Reduce a URL to lowercased host + path for comparison.

    Scheme, query, fragment and a leading "www." are dropped. Anything that
    does not parse as a URL with a host falls back to the lowercased raw
    string.
    """
    raw = (url or "").strip()
    try:
        parts = urlsplit(raw)
        hostname = parts.hostname
    except ValueError:
        return raw.lower()

    if not parts.scheme or not hostname:
        return raw.lower()

    if hostname.startswith("www."):
        hostname = hostname[4:]
    return f"{hostname}{parts.path}".lower()


def urls_match(a: str, b: str) -> bool:
    return normalize_url(a) == normalize_url(b)
