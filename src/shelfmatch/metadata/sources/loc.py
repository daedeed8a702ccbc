# ABOUTME: Library of Congress metadata source (books).
# ABOUTME: Searches the loc.gov books collection JSON API.

import logging
from typing import Any

from shelfmatch.metadata.http import HttpClient, MetadataFetchError
from shelfmatch.metadata.sources.parsing import (
    MalformedResponseError,
    clean_text,
    dict_items,
    expect_dict,
    parse_year,
)
from shelfmatch.metadata.types import MediaType, MetadataCandidate

logger = logging.getLogger(__name__)

SOURCE_NAME = "loc"
TIMEOUT = 10.0

_SEARCH_URL = "https://www.loc.gov/books/"
_RESULT_COUNT = "10"


def _first_text(value: Any) -> str | None:
    """A plain string, or the first string of a list."""
    if isinstance(value, list):
        value = value[0] if value else None
    return clean_text(value)


def parse_search_response(data: Any) -> list[MetadataCandidate]:
    """Map a loc.gov search response to book candidates.

    LoC returns no cover or description for search hits; the first
    contributor is used as the author.
    """
    body = expect_dict(data, "search response")
    candidates: list[MetadataCandidate] = []

    for item in dict_items(body.get("results")):
        title = clean_text(item.get("title"))
        if not title:
            continue
        candidates.append(
            MetadataCandidate(
                source=SOURCE_NAME,
                source_id=clean_text(item.get("id")) or "",
                media_type=MediaType.BOOK,
                title=title,
                title_alternatives=(title,),
                author=_first_text(item.get("contributor")),
                year=parse_year(item.get("date")),
                language=_first_text(item.get("language")),
            )
        )

    return candidates


class LocSource:
    """Metadata source backed by the Library of Congress books search."""

    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    @property
    def name(self) -> str:
        return SOURCE_NAME

    @property
    def media_types(self) -> frozenset[MediaType]:
        return frozenset({MediaType.BOOK})

    def search(self, query: str) -> list[MetadataCandidate]:
        """Search loc.gov; any failure yields an empty list."""
        logger.debug("GET %s q=%r", _SEARCH_URL, query)
        try:
            data = self._http.get(
                _SEARCH_URL, params={"q": query, "fo": "json", "c": _RESULT_COUNT}
            )
        except MetadataFetchError as exc:
            logger.warning("LoC search failed for %r: %s", query, exc)
            return []

        try:
            candidates = parse_search_response(data)
        except MalformedResponseError as exc:
            logger.warning("Malformed LoC response for %r: %s", query, exc)
            return []

        if candidates:
            logger.info("LoC: %d results for %r", len(candidates), query)
        return candidates
