# ABOUTME: Small parsing helpers shared by the provider response mappers.
# ABOUTME: HTML stripping, year extraction, and title/text cleanup.

import html
import re
from collections.abc import Iterable
from typing import Any

_TAG_RE = re.compile(r"<[^>]*>")
_YEAR_RE = re.compile(r"^\s*(\d{4})")


class MalformedResponseError(ValueError):
    """Raised when a provider payload does not have the expected shape."""


def expect_dict(value: Any, what: str) -> dict[str, Any]:
    """Return value if it is a JSON object, else raise MalformedResponseError."""
    if not isinstance(value, dict):
        raise MalformedResponseError(f"expected object for {what}, got {type(value).__name__}")
    return value


def dict_items(value: Any) -> list[dict[str, Any]]:
    """The JSON objects in a list; anything else yields an empty list."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def clean_text(value: Any) -> str | None:
    """Trimmed string, or None for non-strings and blanks."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def strip_html(text: str) -> str:
    """Remove tags, unescape entities, and turn literal "\\n" sequences into spaces."""
    text = _TAG_RE.sub("", text)
    text = html.unescape(text).replace("\\n", " ")
    return text.strip()


def parse_year(value: Any) -> int | None:
    """Year from an int or a date string starting with four digits ("2003-05-01")."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        match = _YEAR_RE.match(value)
        if match:
            return int(match.group(1))
    return None


def unique_titles(values: Iterable[Any]) -> tuple[str, ...]:
    """Non-empty trimmed titles in first-seen order."""
    titles: list[str] = []
    for value in values:
        title = clean_text(value)
        if title and title not in titles:
            titles.append(title)
    return tuple(titles)
