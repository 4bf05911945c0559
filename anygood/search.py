"""
Search over a category's items.

The index maps each term (and each character n-gram of longer terms) to
the positions of the items containing it. It is an explicit value owned by
the caller or by a SearchEngine and is never kept in sync automatically:
rebuild it whenever the item list changes.

Scoring per query token:
- +exact_score for every item whose indexed terms contain the token
- +substring_score when the item's raw text contains the token
- +similarity * fuzzy_weight when the Levenshtein ratio between the token
  and the item's whole text exceeds fuzzy_threshold
"""

from typing import Optional, Sequence

from .logging import get_logger
from .models import Item, SearchResult
from .similarity import string_similarity
from .text_processing import (
    NGRAM_MIN_TOKEN_LENGTH,
    NGRAM_SIZE,
    item_text,
    tokenize,
)

log = get_logger("core", "search")


class SearchIndex:
    """Inverted index from term to item positions."""

    def __init__(
        self,
        ngram_size: int = NGRAM_SIZE,
        ngram_min_token_length: int = NGRAM_MIN_TOKEN_LENGTH,
    ):
        self.ngram_size = ngram_size
        self.ngram_min_token_length = ngram_min_token_length
        self.terms: dict[str, set[int]] = {}
        self.item_count = 0

    def tokenize(self, item) -> set[str]:
        return tokenize(
            item,
            include_ngrams=True,
            ngram_size=self.ngram_size,
            ngram_min_token_length=self.ngram_min_token_length,
        )

    def build(self, items: Sequence[Item]) -> "SearchIndex":
        """Clear and rebuild from the given items."""
        self.terms.clear()
        for position, item in enumerate(items):
            for term in self.tokenize(item):
                self.terms.setdefault(term, set()).add(position)
        self.item_count = len(items)

        log.debug("search.index.built", item_count=self.item_count, term_count=len(self.terms))
        return self

    def positions(self, term: str) -> set[int]:
        return self.terms.get(term, set())

    def is_stale(self, items: Sequence[Item]) -> bool:
        return len(items) != self.item_count

    def __contains__(self, term: str) -> bool:
        return term in self.terms

    def __len__(self) -> int:
        return len(self.terms)


def build_index(
    items: Sequence[Item],
    ngram_size: int = NGRAM_SIZE,
    ngram_min_token_length: int = NGRAM_MIN_TOKEN_LENGTH,
) -> SearchIndex:
    return SearchIndex(ngram_size, ngram_min_token_length).build(items)


class SearchEngine:
    """Scores queries against an owned SearchIndex."""

    def __init__(
        self,
        *,
        min_score: float = 1,
        exact_score: float = 10,
        substring_score: float = 5,
        fuzzy_threshold: float = 0.7,
        fuzzy_weight: float = 3,
        ngram_size: int = NGRAM_SIZE,
        ngram_min_token_length: int = NGRAM_MIN_TOKEN_LENGTH,
    ):
        self.min_score = min_score
        self.exact_score = exact_score
        self.substring_score = substring_score
        self.fuzzy_threshold = fuzzy_threshold
        self.fuzzy_weight = fuzzy_weight
        self.index = SearchIndex(ngram_size, ngram_min_token_length)

    def build_index(self, items: Sequence[Item]) -> SearchIndex:
        """Rebuild the owned index. Call again after any change to the list."""
        return self.index.build(items)

    def search(
        self,
        query: str,
        items: Sequence[Item],
        min_score: Optional[float] = None,
    ) -> list[SearchResult]:
        """
        Rank items against a query.

        A blank query returns every item in order with score 1. Otherwise
        only items that scored are returned, best first, filtered to
        min_score (defaults to the engine's).
        """
        if not query or not query.strip():
            return [SearchResult(item=item, index=i, score=1) for i, item in enumerate(items)]

        if self.index.is_stale(items):
            log.warning(
                "search.index.stale",
                indexed=self.index.item_count,
                current=len(items),
            )

        query_terms = self.index.tokenize(query)
        scores: dict[int, float] = {}

        # Indexed matches
        for term in query_terms:
            for position in self.index.positions(term):
                if position < len(items):
                    scores[position] = scores.get(position, 0) + self.exact_score

        # Raw text matches
        for position, item in enumerate(items):
            text = item_text(item).lower()
            for term in query_terms:
                if term in text:
                    scores[position] = scores.get(position, 0) + self.substring_score
                similarity = string_similarity(term, text)
                if similarity > self.fuzzy_threshold:
                    scores[position] = scores.get(position, 0) + similarity * self.fuzzy_weight

        threshold = self.min_score if min_score is None else min_score
        # Ties keep list order
        ranked = sorted(scores.items(), key=lambda entry: (-entry[1], entry[0]))
        results = [
            SearchResult(item=items[position], index=position, score=score)
            for position, score in ranked
            if score >= threshold
        ]

        log.debug(
            "search.query.completed",
            term_count=len(query_terms),
            result_count=len(results),
        )
        return results


def search(
    query: str,
    items: Sequence[Item],
    index: SearchIndex,
    min_score: float = 1,
    **options,
) -> list[SearchResult]:
    """Search with a caller-owned index."""
    engine = SearchEngine(
        min_score=min_score,
        ngram_size=index.ngram_size,
        ngram_min_token_length=index.ngram_min_token_length,
        **options,
    )
    engine.index = index
    return engine.search(query, items)
