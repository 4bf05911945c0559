"""Tests for natural-language parsing (local rules and remote fallback)."""

import asyncio
import json

import pytest

from anygood.llm_prompts import build_parse_prompt, parse_llm_parse_response
from anygood.models import CategoryTag
from anygood.parser import (
    CATEGORY_PATTERNS,
    NaturalLanguageParser,
    detect_category,
    parse_natural_language,
)


class TestCategoryRules:
    """Tests for the ordered category pattern table."""

    def test_table_order_is_priority_order(self):
        assert [tag for tag, _ in CATEGORY_PATTERNS] == list(CategoryTag)

    @pytest.mark.parametrize("text, expected", [
        ("Read Piranesi", CategoryTag.READ),
        ("ISBN 9780593230251", CategoryTag.READ),
        ("Blue Lines album", CategoryTag.LISTEN),
        ("spotify:album:4aawyAB9vmqN3uQ7FjRGTy", CategoryTag.LISTEN),
        ("Watch Past Lives (2023)", CategoryTag.WATCH),
        ("Aftersun (2022)", CategoryTag.WATCH),
        ("tt13238346", CategoryTag.WATCH),
        ("Rochelle Canteen restaurant", CategoryTag.EAT),
        ("Michelin place in Soho", CategoryTag.EAT),
        ("Explore the Barbican Conservatory", CategoryTag.DO),
    ])
    def test_detects_category(self, text, expected):
        assert detect_category(text) == expected

    def test_earlier_category_wins(self):
        # "book" (read) and "film" (watch) both present
        assert detect_category("the book behind the film") == CategoryTag.READ

    def test_no_category(self):
        assert detect_category("Rochelle Canteen") is None


class TestParseNaturalLanguage:
    """Tests for the deterministic parser."""

    def test_title_by_author(self):
        parsed = parse_natural_language('"The Creative Act" by Rick Rubin')
        assert parsed.title == "The Creative Act"
        assert parsed.author == "Rick Rubin"
        assert parsed.description is None
        assert parsed.category == CategoryTag.READ

    def test_title_by_author_with_description(self):
        parsed = parse_natural_language("How to Do Nothing by Jenny Odell - resisting the attention economy")
        assert parsed.title == "How to Do Nothing"
        assert parsed.author == "Jenny Odell"
        assert parsed.description == "resisting the attention economy"

    def test_unquoted_title_with_apostrophe(self):
        parsed = parse_natural_language("Giovanni's Room by James Baldwin")
        assert parsed.title == "Giovanni's Room"
        assert parsed.author == "James Baldwin"

    def test_lowercase_after_by_is_not_an_author(self):
        parsed = parse_natural_language("Stand by me")
        assert parsed.author is None
        assert parsed.title == "Stand by me"

    def test_quoted_title_with_description(self):
        parsed = parse_natural_language('"Tomorrow, and Tomorrow, and Tomorrow" a novel about games')
        assert parsed.title == "Tomorrow, and Tomorrow, and Tomorrow"
        assert parsed.description == "a novel about games"

    def test_short_quoted_title_is_not_extracted(self):
        parsed = parse_natural_language('"Dune" tonight')
        assert parsed.description is None
        assert parsed.title == '"Dune" tonight'

    def test_watch_with_year(self):
        parsed = parse_natural_language("Watch Past Lives (2023)")
        assert parsed.category == CategoryTag.WATCH
        assert parsed.title == "Past Lives (2023)"

    def test_strips_verb_and_category_words(self):
        parsed = parse_natural_language("listen to the new Overmono album")
        assert parsed.category == CategoryTag.LISTEN
        assert parsed.title == "the new Overmono"

    def test_http_link_extracted_and_removed_from_title(self):
        parsed = parse_natural_language("Barbican Conservatory https://www.barbican.org.uk/visit/conservatory")
        assert parsed.link == "https://www.barbican.org.uk/visit/conservatory"
        assert parsed.title == "Barbican Conservatory"

    def test_trailing_punctuation_not_part_of_link(self):
        parsed = parse_natural_language("Great essay at https://example.com/essay.")
        assert parsed.link == "https://example.com/essay"

    def test_www_link_made_absolute(self):
        parsed = parse_natural_language("Lot Radio www.thelotradio.com")
        assert parsed.link == "https://www.thelotradio.com"
        assert parsed.title == "Lot Radio"

    def test_spotify_uri(self):
        parsed = parse_natural_language("Good Lies spotify:album:4aawyAB9vmqN3uQ7FjRGTy")
        assert parsed.link == "spotify:album:4aawyAB9vmqN3uQ7FjRGTy"
        assert parsed.category == CategoryTag.LISTEN
        assert parsed.title == "Good Lies"

    def test_imdb_id_synthesizes_link(self):
        parsed = parse_natural_language("Past Lives tt13238346")
        assert parsed.link == "https://www.imdb.com/title/tt13238346/"
        assert parsed.category == CategoryTag.WATCH
        assert parsed.title == "Past Lives"

    def test_imdb_id_does_not_override_url(self):
        parsed = parse_natural_language("tt13238346 https://example.com/past-lives")
        assert parsed.link == "https://example.com/past-lives"

    def test_url_only_falls_back_to_raw_text(self):
        parsed = parse_natural_language("  https://example.com/x  ")
        assert parsed.link == "https://example.com/x"
        assert parsed.title == "https://example.com/x"

    def test_too_short_title_falls_back(self):
        parsed = parse_natural_language("watch it")
        assert parsed.title == "watch it"

    def test_plain_text_unchanged(self):
        parsed = parse_natural_language("  Rochelle Canteen  ")
        assert parsed.title == "Rochelle Canteen"
        assert parsed.category is None
        assert parsed.link is None
        assert parsed.author is None

    @pytest.mark.parametrize("text", ["", "   ", "!!!", "12", "\n\t"])
    def test_degenerate_input_never_raises(self, text):
        parsed = parse_natural_language(text)
        assert parsed.title == text.strip()
        assert parsed.link is None

    def test_non_string_input(self):
        assert parse_natural_language(None).title == ""


class TestParseResponse:
    """Tests for remote response validation."""

    def test_prompt_contains_text_and_categories(self):
        prompt = build_parse_prompt("Past Lives")
        assert "Past Lives" in prompt
        assert "read, listen, watch, eat, do" in prompt

    def test_valid_json(self, valid_llm_response):
        parsed = parse_llm_parse_response(valid_llm_response)
        assert parsed.title == "Past Lives"
        assert parsed.description == "Celine Song"
        assert parsed.category == CategoryTag.WATCH

    def test_fenced_json(self, valid_llm_response):
        parsed = parse_llm_parse_response(f"Here you go:\n```json\n{valid_llm_response}\n```")
        assert parsed.title == "Past Lives"

    @pytest.mark.parametrize("response", [
        "",
        "not json at all",
        "{broken json",
        json.dumps(["a", "list"]),
        json.dumps({"title": ""}),
        json.dumps({"title": 42}),
        json.dumps({"title": "Ok", "author": ["x"]}),
        json.dumps({"title": "Ok", "category": "sleep"}),
        None,
    ])
    def test_invalid_shapes(self, response):
        assert parse_llm_parse_response(response) is None

    def test_null_category_allowed(self):
        parsed = parse_llm_parse_response(json.dumps({"title": "Something", "category": None}))
        assert parsed.title == "Something"
        assert parsed.category is None


class TestNaturalLanguageParser:
    """Tests for the remote-then-local composition."""

    @pytest.mark.asyncio
    async def test_local_only_without_callback(self):
        parser = NaturalLanguageParser()
        parsed = await parser.parse('"The Creative Act" by Rick Rubin')
        assert parsed.author == "Rick Rubin"
        assert parser.get_stats()["local"] == 1

    @pytest.mark.asyncio
    async def test_remote_result_used_when_valid(self, make_llm_callback, valid_llm_response):
        callback = make_llm_callback(response=valid_llm_response)
        parser = NaturalLanguageParser(llm_callback=callback)

        parsed = await parser.parse("that korean film celine song made")

        assert parsed.title == "Past Lives"
        assert parsed.category == CategoryTag.WATCH
        assert len(callback.calls) == 1
        assert parser.get_stats()["remote"] == 1

    @pytest.mark.asyncio
    async def test_falls_back_on_error(self, make_llm_callback):
        callback = make_llm_callback(error=RuntimeError("rate limited"))
        parser = NaturalLanguageParser(llm_callback=callback)

        parsed = await parser.parse("Watch Past Lives (2023)")

        assert parsed.title == "Past Lives (2023)"
        assert parser.get_stats()["remote_failures"] == 1

    @pytest.mark.asyncio
    async def test_falls_back_on_invalid_response(self, make_llm_callback):
        parser = NaturalLanguageParser(llm_callback=make_llm_callback(response="I think it's a film"))
        parsed = await parser.parse("Watch Past Lives (2023)")
        assert parsed.title == "Past Lives (2023)"

    @pytest.mark.asyncio
    async def test_falls_back_on_timeout(self):
        async def slow(prompt):
            await asyncio.sleep(1)
            return "{}"

        parser = NaturalLanguageParser(llm_callback=slow, remote_timeout=0.01)
        parsed = await parser.parse("Watch Past Lives (2023)")
        assert parsed.category == CategoryTag.WATCH

    @pytest.mark.asyncio
    async def test_blank_text_skips_remote(self, make_llm_callback, valid_llm_response):
        callback = make_llm_callback(response=valid_llm_response)
        parser = NaturalLanguageParser(llm_callback=callback)

        parsed = await parser.parse("   ")

        assert parsed.title == ""
        assert callback.calls == []
