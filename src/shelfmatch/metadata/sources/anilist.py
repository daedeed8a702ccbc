# ABOUTME: AniList metadata source (manga) via the public GraphQL API.
# ABOUTME: Maps romaji/english/native titles, cleaned descriptions, and the largest cover.

import logging
from typing import Any

from shelfmatch.metadata.http import HttpClient, MetadataFetchError
from shelfmatch.metadata.sources.parsing import (
    MalformedResponseError,
    clean_text,
    dict_items,
    expect_dict,
    parse_year,
    strip_html,
    unique_titles,
)
from shelfmatch.metadata.types import MediaType, MetadataCandidate

logger = logging.getLogger(__name__)

SOURCE_NAME = "anilist"
TIMEOUT = 8.0

_ENDPOINT = "https://graphql.anilist.co"

_SEARCH_QUERY = """
query ($search: String!) {
    Page(perPage: 10) {
        media(search: $search, type: MANGA) {
            id
            title { romaji english native }
            coverImage { extraLarge large medium }
            description
            startDate { year }
            studios(isMain: true) { nodes { name } }
        }
    }
}
"""


def _largest_cover(cover: Any) -> str | None:
    if not isinstance(cover, dict):
        return None
    for size in ("extraLarge", "large", "medium"):
        url = clean_text(cover.get(size))
        if url:
            return url
    return None


def _main_studio(studios: Any) -> str | None:
    if not isinstance(studios, dict):
        return None
    for node in dict_items(studios.get("nodes")):
        name = clean_text(node.get("name"))
        if name:
            return name
    return None


def parse_media_response(data: Any) -> list[MetadataCandidate]:
    """Map an AniList ``Page.media`` response to manga candidates.

    The primary title prefers romaji, then English, then native; all three
    are kept as alternatives.
    """
    body = expect_dict(data, "graphql response")
    payload = body.get("data")
    page = payload.get("Page") if isinstance(payload, dict) else None
    media_list = dict_items(page.get("media")) if isinstance(page, dict) else []

    candidates: list[MetadataCandidate] = []
    for media in media_list:
        titles = media.get("title")
        if not isinstance(titles, dict):
            continue
        alternatives = unique_titles(
            [titles.get("romaji"), titles.get("english"), titles.get("native")]
        )
        if not alternatives:
            continue

        description = clean_text(media.get("description"))
        if description:
            description = strip_html(description) or None

        start_date = media.get("startDate")
        media_id = media.get("id")
        candidates.append(
            MetadataCandidate(
                source=SOURCE_NAME,
                source_id=str(media_id) if media_id is not None else "",
                media_type=MediaType.MANGA,
                title=alternatives[0],
                title_alternatives=alternatives,
                author=_main_studio(media.get("studios")),
                description=description,
                cover_url=_largest_cover(media.get("coverImage")),
                year=parse_year(start_date.get("year")) if isinstance(start_date, dict) else None,
            )
        )

    return candidates


class AniListSource:
    """Metadata source backed by AniList's GraphQL API (manga only)."""

    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    @property
    def name(self) -> str:
        return SOURCE_NAME

    @property
    def media_types(self) -> frozenset[MediaType]:
        return frozenset({MediaType.MANGA})

    def search(self, query: str) -> list[MetadataCandidate]:
        """Search AniList manga; any failure yields an empty list."""
        logger.debug("POST %s search=%r", _ENDPOINT, query)
        body = {"query": _SEARCH_QUERY, "variables": {"search": query}}
        try:
            data = self._http.post(_ENDPOINT, json=body)
        except MetadataFetchError as exc:
            logger.warning("AniList search failed for %r: %s", query, exc)
            return []

        try:
            candidates = parse_media_response(data)
        except MalformedResponseError as exc:
            logger.warning("Malformed AniList response for %r: %s", query, exc)
            return []

        if candidates:
            logger.info("AniList: %d results for %r", len(candidates), query)
        return candidates
