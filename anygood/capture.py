"""
Capture flow: raw text to a categorized Item.

    raw text -> parser (remote, then local) -> classifier -> Item

Also holds clipboard suggestion heuristics and post-hoc metadata
enrichment through an external fetcher.
"""

import re
from typing import Any, Awaitable, Callable, Mapping, Optional

from .classifier import classify
from .logging import get_logger
from .models import CategoryTag, Item, ItemMetadata, ParsedCandidate
from .parser import NaturalLanguageParser, parse_natural_language
from .urls import detect_url

log = get_logger("core", "capture")

# External fetch-and-parse service: url -> {title?, description?, image?, author?, error?}
MetadataFetcher = Callable[[str], Awaitable[Optional[Mapping[str, Any]]]]

CODE_PATTERNS = (
    re.compile(r"^[a-zA-Z0-9_$]+\s*[=:]\s*"),  # assignments
    re.compile(r"^[{}\[\]]+"),
    re.compile(r"^(//|/\*|#|<!--)"),  # comments
    re.compile(r"^function\s*\(|^const\s+\w+\s*=|^let\s+\w+\s*=|^var\s+\w+\s*=|^def\s+\w+\s*\("),
    re.compile(r"\n.*\{.*\}"),  # blocks
)

MIN_CLIPBOARD_LENGTH = 3
MAX_ADDABLE_LENGTH = 200


def resolve_category(candidate: ParsedCandidate, raw_text: str = "") -> CategoryTag:
    """Parser category if one was detected, otherwise the classifier's."""
    if candidate.category is not None:
        return candidate.category
    return classify({"text": candidate.title or raw_text, "description": candidate.description})


def item_from_candidate(candidate: ParsedCandidate, raw_text: str = "") -> Item:
    return Item.create(
        text=candidate.title or raw_text.strip(),
        description=candidate.description,
        link=candidate.link,
        author=candidate.author,
    )


async def capture_text(
    text: str,
    parser: Optional[NaturalLanguageParser] = None,
) -> tuple[CategoryTag, Item]:
    """
    Turn captured text into a new item and the category it belongs to.

    Args:
        text: Raw pasted / typed text
        parser: Parser to use; a local-only parser when None
    """
    parser = parser or NaturalLanguageParser()
    candidate = await parser.parse(text)
    category = resolve_category(candidate, text)
    item = item_from_candidate(candidate, text)

    log.info(
        "capture.item.created",
        category=category.value,
        detected=candidate.category is not None,
        has_link=item.link is not None,
    )
    return category, item


async def enrich_item(item: Item, fetch_metadata: Optional[MetadataFetcher]) -> Item:
    """
    Fill missing description, image and author from fetched metadata.

    Fetch errors and records carrying an ``error`` field count as "no data";
    fields the item already has are never overwritten.
    """
    if not item.link or fetch_metadata is None:
        return item

    try:
        raw = await fetch_metadata(item.link)
    except Exception as e:
        log.warning("capture.metadata.fetch_failed", link=item.link, error=str(e))
        return item

    metadata = ItemMetadata.from_dict(raw)
    if not metadata.has_data:
        log.debug("capture.metadata.no_data", link=item.link, error=metadata.error)
        return item

    if metadata.description and not item.description:
        item.description = metadata.description
    if metadata.image and not item.image:
        item.image = metadata.image
    if metadata.author and not item.author:
        item.author = metadata.author

    log.debug("capture.metadata.applied", link=item.link)
    return item


def looks_like_code(text: str) -> bool:
    """Heuristic for clipboard text that is source code or config."""
    stripped = (text or "").strip()
    return any(pattern.search(stripped) for pattern in CODE_PATTERNS)


def is_addable_content(text: str, candidate: ParsedCandidate) -> bool:
    """Whether clipboard text looks like something worth saving."""
    has_url = detect_url(text) is not None
    has_title = bool(candidate.title) and len(candidate.title) > 3
    has_category = candidate.category is not None
    looks_like_item = 5 < len(text or "") < MAX_ADDABLE_LENGTH
    return (has_url or has_title or has_category) and looks_like_item


def suggest_from_clipboard(
    text: str,
    previous: Optional[str] = None,
) -> Optional[ParsedCandidate]:
    """
    Parsed candidate to offer as a clipboard suggestion, or None.

    Skips repeats of the previous clipboard content, very short text and
    code-like text.
    """
    if not text or text == previous:
        return None
    if len(text.strip()) < MIN_CLIPBOARD_LENGTH or looks_like_code(text):
        return None

    candidate = parse_natural_language(text)
    if not is_addable_content(text, candidate):
        return None
    return candidate
