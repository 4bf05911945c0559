"""Shared fixtures for anygood tests."""

import json

import pytest

from anygood.models import Item


@pytest.fixture
def make_item():
    """Build items with fixed, increasing ids."""
    counter = {"next": 1000.0}

    def _make(text, **fields):
        counter["next"] += 1
        return Item(id=counter["next"], text=text, **fields)

    return _make


@pytest.fixture
def reading_list(make_item):
    """A small read category."""
    return [
        make_item("The Creative Act", description="Rick Rubin on making things", tags=["creativity"]),
        make_item("Luster", description="Raven Leilani debut novel"),
        make_item("How to Do Nothing", description="Jenny Odell - resisting the attention economy"),
        make_item("Brick Lane", description="Monica Ali"),
    ]


@pytest.fixture
def valid_llm_response():
    return json.dumps({
        "title": "Past Lives",
        "description": "Celine Song",
        "author": None,
        "link": None,
        "category": "watch",
    })


@pytest.fixture
def make_llm_callback():
    """Async callback returning a fixed response (or raising)."""
    def _make(response=None, error=None):
        calls = []

        async def callback(prompt):
            calls.append(prompt)
            if error is not None:
                raise error
            return response

        callback.calls = calls
        return callback

    return _make


@pytest.fixture
def sample_config():
    """Sample configuration for tests."""
    return {
        "parser": {
            "use_remote": False,
            "remote_timeout_seconds": 2,
        },
        "duplicates": {
            "similarity_threshold": 0.9,
            "description_weight": 0.7,
            "link_weight": 0.5,
        },
        "search": {
            "min_score": 5,
            "exact_score": 10,
            "substring_score": 5,
        },
        "logging": {
            "level": "DEBUG",
        },
    }


@pytest.fixture
def config_file(tmp_path, sample_config):
    import yaml

    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(sample_config), encoding="utf-8")
    return path


@pytest.fixture
def items_file(tmp_path):
    path = tmp_path / "items.json"
    path.write_text(json.dumps([
        {"text": "Past Lives", "link": "https://www.imdb.com/title/tt13238346/"},
        {"text": "past lives!", "link": "http://imdb.com/title/tt13238346/?ref_=nv"},
        {"text": "Aftersun", "description": "Charlotte Wells"},
    ]), encoding="utf-8")
    return path
