"""
Data models for captured items.

Contains:
- CategoryTag enum
- ParsedCandidate dataclass
- Item dataclass
- Collection / Category containers
- DuplicateGroup, SearchResult and ItemMetadata result types
"""

import random
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping, Optional


class CategoryTag(str, Enum):
    """Core categories, in classification priority order."""
    READ = "read"
    LISTEN = "listen"
    WATCH = "watch"
    EAT = "eat"
    DO = "do"

    @classmethod
    def from_value(cls, value: Any) -> Optional["CategoryTag"]:
        """Coerce a string to a tag, None if it is not a known category."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


def generate_item_id() -> float:
    """Creation time in milliseconds plus a random fraction to break ties."""
    return time.time() * 1000 + random.random()


@dataclass
class ParsedCandidate:
    """Structured fields extracted from captured text."""
    title: str
    description: Optional[str] = None
    author: Optional[str] = None
    link: Optional[str] = None
    category: Optional[CategoryTag] = None

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "author": self.author,
            "link": self.link,
            "category": self.category.value if self.category else None,
        }


@dataclass
class Item:
    """
    A unit of content within a category.

    An item is owned by exactly one list; moving it between categories
    removes it from the source before appending it to the destination.
    """
    id: float
    text: str
    completed: bool = False
    description: Optional[str] = None
    link: Optional[str] = None
    author: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    image: Optional[str] = None
    source: Optional[str] = None

    @classmethod
    def create(cls, text: str, **fields) -> "Item":
        return cls(id=generate_item_id(), text=text, **fields)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Item":
        """
        Build an item from a plain mapping.

        Accepts ``title`` as an alias for ``text`` and assigns a fresh id
        when none is present.
        """
        item_id = data.get("id")
        if item_id is None:
            item_id = generate_item_id()
        tags = data.get("tags") or []
        return cls(
            id=item_id,
            text=str(data.get("text", data.get("title", "")) or ""),
            completed=bool(data.get("completed", False)),
            description=data.get("description") or None,
            link=data.get("link") or None,
            author=data.get("author") or None,
            tags=list(tags),
            image=data.get("image") or None,
            source=data.get("source") or None,
        )

    def to_dict(self) -> dict:
        data = {"id": self.id, "text": self.text, "completed": self.completed}
        for key in ("description", "link", "author", "image", "source"):
            value = getattr(self, key)
            if value:
                data[key] = value
        if self.tags:
            data["tags"] = list(self.tags)
        return data


class CollectionKind(str, Enum):
    """How a collection came to exist."""
    USER = "user"
    IMPORTED = "imported"  # auto-refreshed digest
    CURATED = "curated"


@dataclass
class Collection:
    """A named sub-grouping of items within a category."""
    name: str
    kind: CollectionKind = CollectionKind.USER
    items: list[Item] = field(default_factory=list)
    feed_url: Optional[str] = None
    last_updated: Optional[float] = None

    @property
    def deletable(self) -> bool:
        return self.kind != CollectionKind.IMPORTED

    def add_item(self, item: Item) -> None:
        self.items.append(item)

    def remove_item(self, index: int) -> Item:
        """Remove and return an item. Digest items can only leave by promotion."""
        if self.kind == CollectionKind.IMPORTED:
            raise ValueError(
                f"Items in imported collection '{self.name}' can only be promoted"
            )
        return self.items.pop(index)

    def promote(self, index: int, category: "Category") -> Item:
        """Move an item from this collection into the category's main list."""
        item = self.items.pop(index)
        item = replace(item, completed=False)
        category.add_item(item)
        return item


@dataclass
class Category:
    """A named bucket of items and collections."""
    slug: str
    name: str
    icon: str = ""
    items: list[Item] = field(default_factory=list)
    collections: list[Collection] = field(default_factory=list)
    is_core: bool = False

    @classmethod
    def create(cls, name: str, icon: str = "") -> "Category":
        from .text_processing import slugify
        return cls(slug=slugify(name), name=name.strip(), icon=icon)

    def add_item(self, item: Item) -> None:
        self.items.append(item)

    def remove_item(self, index: int) -> Item:
        return self.items.pop(index)

    def move_item(self, index: int, destination: "Category") -> Item:
        """Transfer ownership of an item to another category."""
        if destination is self:
            return self.items[index]
        item = self.items.pop(index)
        destination.add_item(item)
        return item

    def rename(self, name: str) -> None:
        if self.is_core:
            raise ValueError(f"Core category '{self.slug}' cannot be renamed")
        self.name = name.strip()

    def add_collection(self, collection: Collection) -> None:
        self.collections.append(collection)

    def remove_collection(self, index: int) -> Collection:
        collection = self.collections[index]
        if not collection.deletable:
            raise ValueError(f"Imported collection '{collection.name}' cannot be deleted")
        return self.collections.pop(index)


CORE_CATEGORY_DISPLAY = {
    CategoryTag.READ: ("Read", "📚"),
    CategoryTag.LISTEN: ("Listen", "🎧"),
    CategoryTag.WATCH: ("Watch", "🎬"),
    CategoryTag.EAT: ("Eat", "🍽"),
    CategoryTag.DO: ("Do", "✨"),
}


def default_categories() -> list[Category]:
    """The five core categories, which cannot be renamed or deleted."""
    return [
        Category(slug=tag.value, name=name, icon=icon, is_core=True)
        for tag, (name, icon) in CORE_CATEGORY_DISPLAY.items()
    ]


@dataclass
class DuplicateGroup:
    """Items judged to represent the same real-world thing."""
    indices: list[int]
    items: list[Item]
    confidence: float = 0.0  # exact-match ratio, not the fuzzy score

    @property
    def size(self) -> int:
        return len(self.indices)


@dataclass
class SearchResult:
    """A scored search hit."""
    item: Item
    index: int
    score: float


@dataclass
class ItemMetadata:
    """Record returned by an external metadata fetcher."""
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    author: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ItemMetadata":
        if not data or not isinstance(data, Mapping):
            return cls()
        return cls(
            title=data.get("title") or None,
            description=data.get("description") or None,
            image=data.get("image") or None,
            author=data.get("author") or None,
            error=data.get("error") or None,
        )

    @property
    def has_data(self) -> bool:
        return self.error is None and any(
            (self.title, self.description, self.image, self.author)
        )
