# ABOUTME: Open Library metadata source (books).
# ABOUTME: Free-text search against openlibrary.org/search.json mapped to unified candidates.

import logging
from typing import Any

from shelfmatch.metadata.http import HttpClient, MetadataFetchError
from shelfmatch.metadata.sources.parsing import (
    MalformedResponseError,
    clean_text,
    dict_items,
    expect_dict,
    parse_year,
    unique_titles,
)
from shelfmatch.metadata.types import MediaType, MetadataCandidate

logger = logging.getLogger(__name__)

SOURCE_NAME = "open_library"
TIMEOUT = 10.0

_SEARCH_URL = "https://openlibrary.org/search.json"
_COVER_URL = "https://covers.openlibrary.org/b/id/{cover_id}-L.jpg"


def _join_strings(value: Any) -> str | None:
    if not isinstance(value, list):
        return None
    names = [name for name in (clean_text(v) for v in value) if name]
    return ", ".join(names) or None


def parse_search_response(data: Any) -> list[MetadataCandidate]:
    """Map an Open Library search response to book candidates.

    Docs without a title are skipped. The cover uses the large ("-L")
    rendition of ``cover_i``.
    """
    body = expect_dict(data, "search response")
    candidates: list[MetadataCandidate] = []

    for doc in dict_items(body.get("docs")):
        title = clean_text(doc.get("title"))
        if not title:
            continue

        subtitle = clean_text(doc.get("subtitle"))
        full_title = f"{title}: {subtitle}" if subtitle else None
        key = clean_text(doc.get("key")) or ""
        cover_id = doc.get("cover_i")
        cover_url = (
            _COVER_URL.format(cover_id=cover_id)
            if isinstance(cover_id, int) and not isinstance(cover_id, bool)
            else None
        )
        languages = doc.get("language")
        language = clean_text(languages[0]) if isinstance(languages, list) and languages else None

        candidates.append(
            MetadataCandidate(
                source=SOURCE_NAME,
                source_id=key.removeprefix("/works/"),
                media_type=MediaType.BOOK,
                title=title,
                title_alternatives=unique_titles([title, full_title]),
                author=_join_strings(doc.get("author_name")),
                cover_url=cover_url,
                year=parse_year(doc.get("first_publish_year")),
                language=language,
            )
        )

    return candidates


class OpenLibrarySource:
    """Metadata source backed by the Open Library search API."""

    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    @property
    def name(self) -> str:
        return SOURCE_NAME

    @property
    def media_types(self) -> frozenset[MediaType]:
        return frozenset({MediaType.BOOK})

    def search(self, query: str) -> list[MetadataCandidate]:
        """Search Open Library; any failure yields an empty list."""
        logger.debug("GET %s q=%r", _SEARCH_URL, query)
        try:
            data = self._http.get(_SEARCH_URL, params={"q": query})
        except MetadataFetchError as exc:
            logger.warning("Open Library search failed for %r: %s", query, exc)
            return []

        try:
            candidates = parse_search_response(data)
        except MalformedResponseError as exc:
            logger.warning("Malformed Open Library response for %r: %s", query, exc)
            return []

        if candidates:
            logger.info("Open Library: %d results for %r", len(candidates), query)
        return candidates
