"""
Utility functions.

Contains:
- Configuration loading
- Factory functions for configured components
"""

from pathlib import Path
from typing import Optional, Union

import yaml

from .claude_api import DEFAULT_MODEL, ClaudeClient
from .duplicates import DuplicateDetector
from .logging import get_logger
from .parser import LLMCallback, NaturalLanguageParser
from .search import SearchEngine

log = get_logger("core", "utils")

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config.yaml"


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    section: Optional[str] = None,
) -> dict:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to config file. If None, uses config.yaml at the project root
        section: Return only this top-level section

    Returns:
        Config dict ({} if the file is missing or malformed)
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            full_config = yaml.safe_load(f) or {}
    except (FileNotFoundError, yaml.YAMLError) as e:
        log.warning(
            "config.load_failed",
            config_path=str(config_path),
            error=str(e),
        )
        return {}

    if not isinstance(full_config, dict):
        log.warning("config.not_a_mapping", config_path=str(config_path))
        return {}

    if section is None:
        return full_config
    return full_config.get(section) or {}


def _section(config: Optional[dict], name: str) -> dict:
    if config is None:
        return load_config(section=name)
    return config.get(name, config) or {}


def get_parser(
    config: Optional[dict] = None,
    llm_callback: Optional[LLMCallback] = None,
) -> NaturalLanguageParser:
    """
    Factory for a NaturalLanguageParser.

    When no callback is passed and ``parser.use_remote`` is set, a Claude
    client is wired in as the remote layer.

    Args:
        config: Full config or the ``parser`` section. If None, loads config.yaml
        llm_callback: Remote parse callback (overrides config)
    """
    parser_config = _section(config, "parser")

    if llm_callback is None and parser_config.get("use_remote", False):
        client = ClaudeClient(model=parser_config.get("model", DEFAULT_MODEL))
        if client.is_available():
            llm_callback = client.as_callback()

    return NaturalLanguageParser(
        llm_callback=llm_callback,
        remote_timeout=float(parser_config.get("remote_timeout_seconds", 15.0)),
    )


def get_duplicate_detector(config: Optional[dict] = None) -> DuplicateDetector:
    """Factory for a DuplicateDetector from the ``duplicates`` section."""
    dup_config = _section(config, "duplicates")
    return DuplicateDetector(
        similarity_threshold=dup_config.get("similarity_threshold", 0.85),
        description_weight=dup_config.get("description_weight", 0.7),
        link_weight=dup_config.get("link_weight", 0.5),
    )


def get_search_engine(config: Optional[dict] = None) -> SearchEngine:
    """Factory for a SearchEngine from the ``search`` section."""
    search_config = _section(config, "search")
    return SearchEngine(
        min_score=search_config.get("min_score", 1),
        exact_score=search_config.get("exact_score", 10),
        substring_score=search_config.get("substring_score", 5),
        fuzzy_threshold=search_config.get("fuzzy_threshold", 0.7),
        fuzzy_weight=search_config.get("fuzzy_weight", 3),
        ngram_size=search_config.get("ngram_size", 3),
        ngram_min_token_length=search_config.get("ngram_min_token_length", 4),
    )
