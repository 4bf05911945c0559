"""
Anygood core: text understanding and deduplication for a personal
read / listen / watch / eat / do list.

Pipeline:
    raw text -> normalizer -> parser -> classifier (if no category) -> Item

On demand:
    DuplicateDetector groups near-duplicate items of a category
    SearchEngine indexes items (terms + trigrams) and ranks queries

Usage:
    from anygood import parse_natural_language, classify, DuplicateDetector, SearchEngine

    candidate = parse_natural_language('"The Creative Act" by Rick Rubin')
    candidate.title   # "The Creative Act"
    candidate.author  # "Rick Rubin"

    engine = SearchEngine()
    engine.build_index(items)
    results = engine.search("rubin", items)
"""

# Models
from .models import (
    CategoryTag,
    ParsedCandidate,
    Item,
    Collection,
    CollectionKind,
    Category,
    DuplicateGroup,
    SearchResult,
    ItemMetadata,
    default_categories,
    generate_item_id,
)

# Text processing
from .text_processing import (
    STOP_WORDS,
    normalize_text,
    extract_terms,
    extract_ngrams,
    tokenize,
    slugify,
    summarize_description,
)

# Similarity
from .similarity import (
    levenshtein,
    string_similarity,
    normalize_url,
    urls_match,
)
from .urls import detect_url, ensure_scheme, get_hostname, is_url

# Parsing and classification
from .parser import (
    CATEGORY_PATTERNS,
    LLMCallback,
    NaturalLanguageParser,
    detect_category,
    parse_natural_language,
)
from .classifier import CATEGORY_KEYWORDS, classify, score_categories
from .claude_api import ClaudeClient

# Duplicates and search
from .duplicates import DuplicateDetector
from .search import SearchEngine, SearchIndex, build_index, search

# Capture flow
from .capture import (
    MetadataFetcher,
    capture_text,
    enrich_item,
    resolve_category,
    suggest_from_clipboard,
)

# Utils
from .utils import (
    load_config,
    get_parser,
    get_duplicate_detector,
    get_search_engine,
)

__all__ = [
    # Models
    "CategoryTag",
    "ParsedCandidate",
    "Item",
    "Collection",
    "CollectionKind",
    "Category",
    "DuplicateGroup",
    "SearchResult",
    "ItemMetadata",
    "default_categories",
    "generate_item_id",
    # Text processing
    "STOP_WORDS",
    "normalize_text",
    "extract_terms",
    "extract_ngrams",
    "tokenize",
    "slugify",
    "summarize_description",
    # Similarity
    "levenshtein",
    "string_similarity",
    "normalize_url",
    "urls_match",
    "detect_url",
    "ensure_scheme",
    "get_hostname",
    "is_url",
    # Parsing and classification
    "CATEGORY_PATTERNS",
    "LLMCallback",
    "NaturalLanguageParser",
    "detect_category",
    "parse_natural_language",
    "CATEGORY_KEYWORDS",
    "classify",
    "score_categories",
    "ClaudeClient",
    # Duplicates and search
    "DuplicateDetector",
    "SearchEngine",
    "SearchIndex",
    "build_index",
    "search",
    # Capture flow
    "MetadataFetcher",
    "capture_text",
    "enrich_item",
    "resolve_category",
    "suggest_from_clipboard",
    # Utils
    "load_config",
    "get_parser",
    "get_duplicate_detector",
    "get_search_engine",
]
