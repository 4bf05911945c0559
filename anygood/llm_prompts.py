"""
LLM prompt building and response parsing for remote text parsing.

Contains:
- Parse prompt building
- Response parsing and shape validation
"""

import json
import re
from typing import Any, Optional

from .models import CategoryTag, ParsedCandidate

_OPTIONAL_FIELDS = ("description", "author", "link")


def build_parse_prompt(text: str) -> str:
    """Build prompt asking the LLM to structure a captured note."""
    categories = ", ".join(tag.value for tag in CategoryTag)
    return f"""Extract structured fields from this note someone saved to their personal to-do list of things to read, listen to, watch, eat or do.

NOTE:
{text[:1000]}

Fields:
- title: the name of the thing (book, album, film, restaurant, activity), without verbs like "read" or "watch"
- description: any extra free text, or null
- author: the author, artist or director if stated, or null
- link: an absolute URL or URI if present in the note, or null
- category: one of {categories}, or null if unclear

Respond with ONLY a JSON object, for example:
{{"title": "The Creative Act", "description": null, "author": "Rick Rubin", "link": null, "category": "read"}}"""


def _extract_json_object(response: str) -> Optional[Any]:
    """Pull a JSON object out of a response that may be fenced or padded."""
    fenced = re.search(r"```(?:json)?\s*(\{.*?\})\s*```", response, re.DOTALL)
    if fenced:
        candidate = fenced.group(1)
    else:
        start = response.find("{")
        end = response.rfind("}")
        if start == -1 or end <= start:
            return None
        candidate = response[start:end + 1]

    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        return None


def parse_llm_parse_response(response: Any) -> Optional[ParsedCandidate]:
    """
    Parse and validate an LLM parse response.

    Returns None unless the response holds a JSON object with a non-empty
    string title, string-or-null optional fields, and a known category or
    null.
    """
    if not isinstance(response, str) or not response.strip():
        return None

    data = _extract_json_object(response)
    if not isinstance(data, dict):
        return None

    title = data.get("title")
    if not isinstance(title, str) or not title.strip():
        return None

    fields = {}
    for name in _OPTIONAL_FIELDS:
        value = data.get(name)
        if value is not None and not isinstance(value, str):
            return None
        fields[name] = value.strip() if value else None
        if fields[name] == "":
            fields[name] = None

    raw_category = data.get("category")
    category = None
    if raw_category is not None:
        category = CategoryTag.from_value(raw_category)
        if category is None:
            return None

    return ParsedCandidate(
        title=title.strip(),
        description=fields["description"],
        author=fields["author"],
        link=fields["link"],
        category=category,
    )
