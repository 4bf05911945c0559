"""Tests for the capture flow, enrichment and clipboard heuristics."""

import pytest

from anygood.capture import (
    capture_text,
    enrich_item,
    is_addable_content,
    looks_like_code,
    resolve_category,
    suggest_from_clipboard,
)
from anygood.models import CategoryTag, ParsedCandidate
from anygood.parser import NaturalLanguageParser


class TestResolveCategory:
    """Tests for resolve_category."""

    def test_parser_category_wins(self):
        candidate = ParsedCandidate(title="Dinner film club", category=CategoryTag.WATCH)
        assert resolve_category(candidate) == CategoryTag.WATCH

    def test_classifier_used_when_undetected(self):
        candidate = ParsedCandidate(title="Rochelle Canteen", description="lunch in a school bike shed")
        assert resolve_category(candidate) == CategoryTag.EAT

    def test_default_when_nothing_matches(self):
        assert resolve_category(ParsedCandidate(title="Zzz")) == CategoryTag.DO


class TestCaptureText:
    """Tests for capture_text."""

    @pytest.mark.asyncio
    async def test_local_capture(self):
        category, item = await capture_text('"The Creative Act" by Rick Rubin')

        assert category == CategoryTag.READ
        assert item.text == "The Creative Act"
        assert item.author == "Rick Rubin"
        assert item.completed is False
        assert item.id is not None

    @pytest.mark.asyncio
    async def test_remote_capture(self, make_llm_callback, valid_llm_response):
        parser = NaturalLanguageParser(llm_callback=make_llm_callback(response=valid_llm_response))

        category, item = await capture_text("celine song's first film", parser)

        assert category == CategoryTag.WATCH
        assert item.text == "Past Lives"
        assert item.description == "Celine Song"

    @pytest.mark.asyncio
    async def test_uncategorized_text_is_classified(self):
        category, item = await capture_text("Rochelle Canteen lunch")
        assert category == CategoryTag.EAT
        assert item.text == "Rochelle Canteen lunch"


class TestEnrichItem:
    """Tests for enrich_item."""

    @pytest.mark.asyncio
    async def test_fills_only_missing_fields(self, make_item):
        async def fetch(url):
            return {"description": "From the page", "image": "https://img/1.jpg", "author": "Celine Song"}

        item = make_item("Past Lives", link="https://example.com/past-lives", author="Someone")
        enriched = await enrich_item(item, fetch)

        assert enriched.description == "From the page"
        assert enriched.image == "https://img/1.jpg"
        assert enriched.author == "Someone"

    @pytest.mark.asyncio
    async def test_error_field_is_no_data(self, make_item):
        async def fetch(url):
            return {"description": "partial", "error": "HTTP 500"}

        item = make_item("Past Lives", link="https://example.com")
        enriched = await enrich_item(item, fetch)

        assert enriched.description is None

    @pytest.mark.asyncio
    async def test_fetch_exception_is_swallowed_at_boundary(self, make_item):
        async def fetch(url):
            raise ConnectionError("offline")

        item = make_item("Past Lives", link="https://example.com")
        assert await enrich_item(item, fetch) is item

    @pytest.mark.asyncio
    async def test_no_link_skips_fetch(self, make_item):
        calls = []

        async def fetch(url):
            calls.append(url)
            return {}

        await enrich_item(make_item("Past Lives"), fetch)
        assert calls == []


class TestClipboard:
    """Tests for clipboard suggestion heuristics."""

    @pytest.mark.parametrize("text", [
        "const x = 1",
        "{\"a\": 1}",
        "# heading",
        "def main():",
        "total = price * qty",
    ])
    def test_looks_like_code(self, text):
        assert looks_like_code(text)

    def test_prose_is_not_code(self):
        assert not looks_like_code("Watch Past Lives (2023)")

    def test_is_addable_content(self):
        assert is_addable_content("Watch Past Lives", ParsedCandidate(title="Past Lives"))
        assert not is_addable_content("hey", ParsedCandidate(title="hey"))
        assert not is_addable_content("x" * 250, ParsedCandidate(title="x" * 250))

    def test_suggestion(self):
        candidate = suggest_from_clipboard('"The Creative Act" by Rick Rubin')
        assert candidate.title == "The Creative Act"

    def test_repeat_and_short_text_skipped(self):
        text = "Watch Past Lives (2023)"
        assert suggest_from_clipboard(text, previous=text) is None
        assert suggest_from_clipboard("ok") is None
        assert suggest_from_clipboard("") is None
        assert suggest_from_clipboard("let y = 2") is None
