# ABOUTME: Kitsu metadata source (anime), JSON:API flavored.
# ABOUTME: Anime candidates are scored but never shown; the source is opt-in.

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

SOURCE_NAME = "kitsu"
TIMEOUT = 8.0

_ANIME_URL = "https://kitsu.io/api/edge/anime"
_HEADERS = {"Accept": "application/vnd.api+json"}


def _poster_url(poster: Any) -> str | None:
    if not isinstance(poster, dict):
        return None
    return clean_text(poster.get("original")) or clean_text(poster.get("large"))


def parse_anime_response(data: Any) -> list[MetadataCandidate]:
    """Map a Kitsu anime search response to anime candidates.

    Alternatives are the canonical title followed by every localized title.
    """
    body = expect_dict(data, "search response")
    candidates: list[MetadataCandidate] = []

    for item in dict_items(body.get("data")):
        attrs = item.get("attributes")
        if not isinstance(attrs, dict):
            continue
        title = clean_text(attrs.get("canonicalTitle"))
        if not title:
            continue

        localized = attrs.get("titles")
        others = list(localized.values()) if isinstance(localized, dict) else []
        candidates.append(
            MetadataCandidate(
                source=SOURCE_NAME,
                source_id=clean_text(item.get("id")) or "",
                media_type=MediaType.ANIME,
                title=title,
                title_alternatives=unique_titles([title, *others]),
                description=clean_text(attrs.get("synopsis")),
                cover_url=_poster_url(attrs.get("posterImage")),
                year=parse_year(attrs.get("startDate")),
            )
        )

    return candidates


class KitsuSource:
    """Metadata source backed by Kitsu's anime search."""

    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    @property
    def name(self) -> str:
        return SOURCE_NAME

    @property
    def media_types(self) -> frozenset[MediaType]:
        return frozenset({MediaType.ANIME})

    def search(self, query: str) -> list[MetadataCandidate]:
        """Search Kitsu anime; any failure yields an empty list."""
        logger.debug("GET %s filter[text]=%r", _ANIME_URL, query)
        try:
            data = self._http.get(
                _ANIME_URL, params={"filter[text]": query}, headers=_HEADERS
            )
        except MetadataFetchError as exc:
            logger.warning("Kitsu search failed for %r: %s", query, exc)
            return []

        try:
            candidates = parse_anime_response(data)
        except MalformedResponseError as exc:
            logger.warning("Malformed Kitsu response for %r: %s", query, exc)
            return []

        if candidates:
            logger.info("Kitsu: %d results for %r", len(candidates), query)
        return candidates
