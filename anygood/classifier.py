"""
Keyword-scoring category classifier.

Used when the parser could not assign a category. Scores are plain
substring hit counts, so "great" counts towards "eat"; that looseness is
accepted for a fixed, explainable table.
"""

from typing import Any

from .logging import get_logger
from .models import CategoryTag
from .text_processing import item_text

log = get_logger("core", "classifier")

DEFAULT_CATEGORY = CategoryTag.DO

CATEGORY_KEYWORDS: dict[CategoryTag, tuple[str, ...]] = {
    CategoryTag.READ: (
        "book", "novel", "read", "author", "essay", "article", "magazine",
        "chapter", "poetry", "memoir", "biography",
    ),
    CategoryTag.LISTEN: (
        "music", "album", "song", "listen", "podcast", "artist", "band",
        "playlist", "radio", "track",
    ),
    CategoryTag.WATCH: (
        "movie", "film", "watch", "series", "show", "episode", "documentary",
        "cinema", "netflix", "trailer",
    ),
    CategoryTag.EAT: (
        "restaurant", "food", "eat", "dining", "dinner", "lunch", "brunch",
        "breakfast", "cafe", "bakery", "bistro", "cuisine", "menu",
    ),
    CategoryTag.DO: (
        "activity", "event", "do", "visit", "explore", "trip", "hike",
        "exhibition", "museum", "gallery", "workshop", "travel",
    ),
}


def score_categories(item: Any) -> dict[CategoryTag, int]:
    """Keyword hit count per category, in priority order."""
    combined = item_text(item).lower()
    return {
        category: sum(1 for keyword in CATEGORY_KEYWORDS[category] if keyword in combined)
        for category in CategoryTag
    }


def classify(item: Any) -> CategoryTag:
    """
    Assign a category by keyword score.

    The strictly highest score wins; ties keep the earlier category in
    priority order, and no hits at all means DEFAULT_CATEGORY.

    Args:
        item: An Item, a mapping with text/description, or a string
    """
    scores = score_categories(item)

    best = DEFAULT_CATEGORY
    best_score = 0
    for category, score in scores.items():
        if score > best_score:
            best, best_score = category, score

    log.debug("classifier.classified", category=best.value, score=best_score)
    return best
