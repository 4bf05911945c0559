"""
Text processing shared by the parser, classifier, duplicate detector and
search index.

Contains:
- Text normalization
- Term extraction and tokenization (with character n-grams for search)
- Category slugs
- Description summaries
"""

import re
from typing import Any, Iterable


# Words too common to be worth indexing
STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at",
    "to", "for", "of", "with", "by",
})

# Search n-gram expansion: terms of at least this length emit n-grams
NGRAM_SIZE = 3
NGRAM_MIN_TOKEN_LENGTH = 4


def normalize_text(text: str) -> str:
    """
    Normalize text for comparison.

    - Lowercase
    - Remove punctuation and other non-word characters
    - Collapse whitespace to single spaces
    """
    if not text:
        return ""
    text = text.lower().strip()
    text = re.sub(r'[^\w\s]', '', text)
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def _item_field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def item_text(item: Any, include_tags: bool = False) -> str:
    """Concatenate an item's text and description (and tags)."""
    if isinstance(item, str):
        return item
    parts = [_item_field(item, "text") or "", _item_field(item, "description") or ""]
    if include_tags:
        parts.extend(_item_field(item, "tags") or [])
    return " ".join(part for part in parts if part)


def extract_terms(text: str) -> list[str]:
    """
    Split text into indexable terms.

    Terms are lowercased, stripped of non-word characters, and dropped when
    they are stop words or two characters or shorter.
    """
    terms = []
    for raw in text.lower().split():
        term = re.sub(r'[^\w]', '', raw)
        if len(term) <= 2 or term in STOP_WORDS:
            continue
        terms.append(term)
    return terms


def extract_ngrams(term: str, n: int = NGRAM_SIZE) -> set[str]:
    """All contiguous n-character substrings of a term."""
    if n <= 0 or len(term) < n:
        return set()
    return {term[i:i + n] for i in range(len(term) - n + 1)}


def tokenize(
    item: Any,
    include_ngrams: bool = False,
    ngram_size: int = NGRAM_SIZE,
    ngram_min_token_length: int = NGRAM_MIN_TOKEN_LENGTH,
) -> set[str]:
    """
    Tokenize an item's text, description and tags.

    Args:
        item: An Item, a mapping with text/description/tags, or a string
        include_ngrams: Add character n-grams of long terms (search indexing)
        ngram_size: Length of each n-gram
        ngram_min_token_length: Only terms at least this long emit n-grams

    Returns:
        Deduplicated set of terms (and n-grams)
    """
    terms = extract_terms(item_text(item, include_tags=True))
    tokens = set(terms)
    if include_ngrams:
        for term in terms:
            if len(term) >= ngram_min_token_length:
                tokens |= extract_ngrams(term, ngram_size)
    return tokens


def tokenize_all(items: Iterable[Any], **kwargs) -> list[set[str]]:
    return [tokenize(item, **kwargs) for item in items]


def slugify(name: str) -> str:
    """Stable lowercase-hyphenated identifier for a category name."""
    slug = re.sub(r'[^\w\s-]', '', (name or "").lower())
    slug = re.sub(r'[\s_-]+', '-', slug).strip('-')
    return slug or "category"


def summarize_description(text: str, max_length: int = 100) -> str:
    """
    Shorten a description for display.

    Prefers cutting at a sentence end in the last 30% of the limit, then at
    a word boundary in the last 20%, then a hard cut.
    """
    if not text or len(text) <= max_length:
        return text

    truncated = text[:max_length]
    last_sentence_end = max(truncated.rfind('.'), truncated.rfind('!'), truncated.rfind('?'))
    if last_sentence_end > max_length * 0.7:
        return text[:last_sentence_end + 1]

    last_space = truncated.rfind(' ')
    if last_space > max_length * 0.8:
        return text[:last_space] + '...'

    return truncated + '...'
