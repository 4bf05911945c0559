"""
Natural-language parsing of captured text.

Turns free text such as '"The Creative Act" by Rick Rubin' or
"Watch Past Lives (2023)" into a ParsedCandidate with title, author,
description, link and category.

Two layers:
1. Optional remote parse via an LLM callback (tried first when configured)
2. Deterministic pattern rules (always available, never raises)
"""

import asyncio
import re
from typing import Awaitable, Callable, Optional

from .logging import get_logger
from .models import CategoryTag, ParsedCandidate
from .llm_prompts import build_parse_prompt, parse_llm_parse_response

log = get_logger("core", "parser")

# Type alias for LLM callback
LLMCallback = Callable[[str], Awaitable[str]]


# =============================================================================
# Category rules
# =============================================================================

# Evaluated in order; the first category with any matching pattern wins.
CATEGORY_PATTERNS: tuple[tuple[CategoryTag, tuple[re.Pattern, ...]], ...] = (
    (CategoryTag.READ, (
        re.compile(
            r"\b(read|book|novel|author|chapter|page|library|literature|"
            r"essay|article|blog|post)\b",
            re.IGNORECASE,
        ),
        re.compile(r"\bISBN\b", re.IGNORECASE),
        re.compile(r"^[\"'“‘]?[^\"“”\n]+?[\"'”’]?\s+by\s+(?-i:[A-Z])", re.IGNORECASE),
    )),
    (CategoryTag.LISTEN, (
        re.compile(
            r"\b(listen|music|album|song|track|artist|band|podcast|episode|"
            r"playlist|spotify|soundcloud)\b",
            re.IGNORECASE,
        ),
        re.compile(r"spotify:(track|album|artist|playlist):", re.IGNORECASE),
    )),
    (CategoryTag.WATCH, (
        re.compile(
            r"\b(watch|movie|film|cinema|series|show|season|netflix|hulu|"
            r"youtube|video|documentary)\b",
            re.IGNORECASE,
        ),
        re.compile(r"\bdisney\+", re.IGNORECASE),
        re.compile(r"\b(imdb|tt\d{7,8})\b", re.IGNORECASE),
        re.compile(r"\(\d{4}\)\s*$"),
    )),
    (CategoryTag.EAT, (
        re.compile(
            r"\b(eat|restaurant|cafe|café|bar|bistro|diner|eatery|food|"
            r"cuisine|menu|dining|reservation)\b",
            re.IGNORECASE,
        ),
        re.compile(r"\b(michelin|review|yelp|opentable)\b", re.IGNORECASE),
    )),
    (CategoryTag.DO, (
        re.compile(
            r"\b(do|activity|event|experience|visit|go|see|explore|trip|"
            r"travel|adventure)\b",
            re.IGNORECASE,
        ),
    )),
)

# Words stripped from a title once its category is known
CATEGORY_WORDS: dict[CategoryTag, tuple[str, ...]] = {
    CategoryTag.READ: ("book", "read"),
    CategoryTag.LISTEN: ("music", "album", "song", "listen"),
    CategoryTag.WATCH: ("movie", "film", "watch", "show"),
    CategoryTag.EAT: ("restaurant", "cafe", "food", "eat"),
    CategoryTag.DO: ("activity", "event", "do"),
}


# =============================================================================
# Extraction patterns
# =============================================================================

# "Title" by Author [- description]
TITLE_BY_AUTHOR = re.compile(
    r"^[\"'“‘]?(?P<title>[^\"“”\n]+?)[\"'”’]?\s+(?i:by)\s+"
    r"(?P<author>[A-Z][\w.'’\- ]*?)"
    r"(?:\s*(?:\s-|[–—])\s*(?P<description>.+))?$"
)

# "Quoted title" [description]
QUOTED_TITLE = re.compile(
    r"^(?:\"(?P<dq>[^\"\n]+)\"|“(?P<cq>[^”\n]+)”|'(?P<sq>[^'\n]+)')"
    r"(?:\s+(?P<description>.+))?$"
)
MIN_QUOTED_TITLE_LENGTH = 6

LEADING_VERB = re.compile(
    r"^(read|watch|listen to|eat at|visit|check out|see)\s+",
    re.IGNORECASE,
)

LINK_PATTERNS = (
    re.compile(r"https?://[^\s]+", re.IGNORECASE),
    re.compile(r"www\.\w+\.\w+[^\s]*", re.IGNORECASE),
    re.compile(r"spotify:(?:track|album|artist|playlist):[a-zA-Z0-9]+", re.IGNORECASE),
)
IMDB_ID = re.compile(r"\btt(\d{7,8})\b", re.IGNORECASE)

MIN_TITLE_LENGTH = 3


def detect_category(text: str) -> Optional[CategoryTag]:
    """First category whose rules match the text, or None."""
    for category, patterns in CATEGORY_PATTERNS:
        if any(pattern.search(text) for pattern in patterns):
            return category
    return None


def extract_link(text: str) -> tuple[Optional[str], str]:
    """
    Find the first link in the text.

    Returns:
        (link, text with the link removed). www. links are made absolute.
    """
    for pattern in LINK_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        raw = match.group(0)
        link = raw.rstrip(".,;:!?")
        remaining = (text[:match.start()] + " " + text[match.start() + len(link):]).strip()
        if link.lower().startswith("www."):
            link = "https://" + link
        return link, remaining
    return None, text


def extract_imdb_link(text: str) -> tuple[Optional[str], str]:
    """Synthesize an IMDb title link from a bare ttNNNNNNN id."""
    match = IMDB_ID.search(text)
    if not match:
        return None, text
    link = f"https://www.imdb.com/title/tt{match.group(1)}/"
    remaining = (text[:match.start()] + " " + text[match.end():]).strip()
    return link, remaining


def _strip_category_words(title: str, category: CategoryTag) -> str:
    for word in CATEGORY_WORDS.get(category, ()):
        title = re.sub(rf"\b{re.escape(word)}\b", "", title, flags=re.IGNORECASE).strip()
    return title


def _clean_title(title: str) -> str:
    title = re.sub(r"\s+", " ", title)
    return re.sub(r"[\s.,;:\-–—]+$", "", title).strip()


def parse_natural_language(text: str) -> ParsedCandidate:
    """
    Parse free text into structured candidate fields.

    Deterministic and total: any string (including "") yields a candidate,
    and the title falls back to the trimmed input when nothing better is
    found.
    """
    if not isinstance(text, str):
        text = "" if text is None else str(text)
    trimmed = text.strip()

    category = detect_category(trimmed)

    link, working = extract_link(trimmed)
    if link is None:
        link, working = extract_imdb_link(working)

    title = working
    author = None
    description = None

    by_author = TITLE_BY_AUTHOR.match(working)
    quoted = QUOTED_TITLE.match(working) if not by_author else None

    if by_author:
        title = by_author.group("title").strip(" \"'“”‘’")
        author = by_author.group("author").strip()
        description = (by_author.group("description") or "").strip() or None
    elif quoted and len(quoted.group("dq") or quoted.group("cq") or quoted.group("sq")) >= MIN_QUOTED_TITLE_LENGTH:
        title = (quoted.group("dq") or quoted.group("cq") or quoted.group("sq")).strip()
        description = (quoted.group("description") or "").strip() or None
    else:
        title = LEADING_VERB.sub("", working).strip()
        if category:
            title = _strip_category_words(title, category)

    title = _clean_title(title)
    if len(title) < MIN_TITLE_LENGTH:
        title = trimmed

    candidate = ParsedCandidate(
        title=title,
        description=description,
        author=author,
        link=link,
        category=category,
    )
    log.debug(
        "parser.local.parsed",
        category=category.value if category else None,
        has_link=link is not None,
        has_author=author is not None,
    )
    return candidate


class NaturalLanguageParser:
    """
    Parser with an optional remote (LLM) layer in front of the local rules.

    The remote layer is a plain async callback taking a prompt and returning
    response text. Its answer is used as-is when structurally valid; any
    error, timeout or malformed answer falls through to the local parser.
    """

    def __init__(
        self,
        llm_callback: Optional[LLMCallback] = None,
        *,
        remote_timeout: float = 15.0,
    ):
        """
        Args:
            llm_callback: Async function that takes a prompt and returns LLM
                          response text. If None, only local rules are used.
            remote_timeout: Seconds to wait for the remote answer
        """
        self.llm_callback = llm_callback
        self.remote_timeout = remote_timeout
        self._stats = {"parses": 0, "remote": 0, "local": 0, "remote_failures": 0}

    @property
    def uses_remote(self) -> bool:
        return self.llm_callback is not None

    async def parse(self, text: str) -> ParsedCandidate:
        """Parse text, trying the remote layer first when configured."""
        self._stats["parses"] += 1

        candidate = await self._parse_remote(text)
        if candidate is not None:
            self._stats["remote"] += 1
            return candidate

        self._stats["local"] += 1
        return self.parse_local(text)

    def parse_local(self, text: str) -> ParsedCandidate:
        return parse_natural_language(text)

    async def _parse_remote(self, text: str) -> Optional[ParsedCandidate]:
        """Remote parse; None means "use the local parser"."""
        if self.llm_callback is None or not isinstance(text, str) or not text.strip():
            return None

        prompt = build_parse_prompt(text.strip())
        try:
            response = await asyncio.wait_for(
                self.llm_callback(prompt), timeout=self.remote_timeout
            )
        except asyncio.TimeoutError:
            self._stats["remote_failures"] += 1
            log.warning("parser.remote.timeout", timeout=self.remote_timeout)
            return None
        except Exception as e:
            self._stats["remote_failures"] += 1
            log.warning("parser.remote.error", error=str(e), error_type=type(e).__name__)
            return None

        candidate = parse_llm_parse_response(response)
        if candidate is None:
            self._stats["remote_failures"] += 1
            log.warning("parser.remote.invalid_response", response_type=type(response).__name__)
            return None

        log.debug("parser.remote.parsed", category=candidate.category.value if candidate.category else None)
        return candidate

    def get_stats(self) -> dict:
        return dict(self._stats)
