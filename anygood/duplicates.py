"""
Duplicate detection and merging for the items of a category.

Groups are formed with a fuzzy similarity threshold, while each group's
confidence is the stricter ratio of exact matches (normalized text or
normalized URL) across its pairs. The two scores are kept separate.
"""

from dataclasses import replace
from typing import Sequence

from .logging import get_logger
from .models import DuplicateGroup, Item
from .similarity import normalize_url, string_similarity
from .text_processing import normalize_text

log = get_logger("core", "duplicates")


class DuplicateDetector:
    """Finds and merges near-duplicate items."""

    def __init__(
        self,
        similarity_threshold: float = 0.85,
        description_weight: float = 0.7,
        link_weight: float = 0.5,
    ):
        """
        Args:
            similarity_threshold: Minimum pairwise similarity to join a group
            description_weight: Scale applied to description similarity
            link_weight: Scale applied to non-identical link similarity
        """
        self.similarity_threshold = similarity_threshold
        self.description_weight = description_weight
        self.link_weight = link_weight

    def calculate_similarity(self, item1: Item, item2: Item) -> float:
        """
        Weighted average over the fields both items have.

        Fields missing on either side are left out of the average rather
        than counted as zero.
        """
        scores = []

        if item1.text and item2.text:
            scores.append(string_similarity(
                normalize_text(item1.text),
                normalize_text(item2.text),
            ))

        if item1.description and item2.description:
            scores.append(string_similarity(
                normalize_text(item1.description),
                normalize_text(item2.description),
            ) * self.description_weight)

        if item1.link and item2.link:
            url1 = normalize_url(item1.link)
            url2 = normalize_url(item2.link)
            if url1 == url2:
                scores.append(1.0)
            else:
                scores.append(string_similarity(url1, url2) * self.link_weight)

        if not scores:
            return 0.0
        return sum(scores) / len(scores)

    def find_duplicates(self, items: Sequence[Item]) -> list[DuplicateGroup]:
        """
        Group near-duplicate items.

        Each unprocessed item collects every later unprocessed item whose
        similarity reaches the threshold. Singleton groups are dropped and
        the rest are ordered by descending confidence.
        """
        groups = []
        processed = set()

        for i in range(len(items)):
            if i in processed:
                continue

            indices = [i]
            for j in range(i + 1, len(items)):
                if j in processed:
                    continue
                similarity = self.calculate_similarity(items[i], items[j])
                if similarity >= self.similarity_threshold:
                    indices.append(j)
                    processed.add(j)

            if len(indices) > 1:
                processed.add(i)
                members = [items[idx] for idx in indices]
                groups.append(DuplicateGroup(
                    indices=indices,
                    items=members,
                    confidence=self.group_confidence(members),
                ))

        groups.sort(key=lambda g: g.confidence, reverse=True)

        log.debug(
            "duplicates.scan.completed",
            item_count=len(items),
            group_count=len(groups),
        )
        return groups

    def group_confidence(self, items: Sequence[Item]) -> float:
        """Fraction of exact text/URL matches over all pairwise comparisons."""
        matches = 0
        total = 0

        for i in range(len(items) - 1):
            for j in range(i + 1, len(items)):
                a, b = items[i], items[j]
                if a.text and b.text:
                    total += 1
                    if normalize_text(a.text) == normalize_text(b.text):
                        matches += 1
                if a.link and b.link:
                    total += 1
                    if normalize_url(a.link) == normalize_url(b.link):
                        matches += 1

        return matches / total if total > 0 else 0.0

    def merge_items(self, items: Sequence[Item]) -> Item:
        """
        Merge duplicates into one item.

        Starts from a copy of the first item and fills description, link,
        tags, image and author from later items only where still missing.
        The title is never merged; the earliest id is kept.
        """
        if not items:
            raise ValueError("Cannot merge an empty list of items")

        merged = replace(items[0], tags=list(items[0].tags))
        for item in items[1:]:
            if item.description and not merged.description:
                merged.description = item.description
            if item.link and not merged.link:
                merged.link = item.link
            if item.tags and not merged.tags:
                merged.tags = list(item.tags)
            if item.image and not merged.image:
                merged.image = item.image
            if item.author and not merged.author:
                merged.author = item.author
            if item.id is not None and (merged.id is None or item.id < merged.id):
                merged.id = item.id

        return merged

    def apply_merge(self, items: Sequence[Item], group: DuplicateGroup) -> list[Item]:
        """
        Collapse a group within a list.

        Returns a new list where the group's first position holds the merged
        item and the group's other positions are removed.
        """
        first = group.indices[0]
        merged = self.merge_items([items[idx] for idx in group.indices])
        dropped = set(group.indices[1:])

        result = []
        for idx, item in enumerate(items):
            if idx in dropped:
                continue
            result.append(merged if idx == first else item)

        log.info(
            "duplicates.group.merged",
            kept_index=first,
            removed=len(dropped),
        )
        return result
