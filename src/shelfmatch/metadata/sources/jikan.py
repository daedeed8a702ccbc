# ABOUTME: Jikan (unofficial MyAnimeList API) metadata source for manga.
# ABOUTME: Maps MAL titles, synopsis, authors, cover, and publication year.

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

SOURCE_NAME = "jikan"
TIMEOUT = 8.0
# Jikan allows about three requests per second.
MIN_REQUEST_INTERVAL = 0.35

_MANGA_URL = "https://api.jikan.moe/v4/manga"
_RESULT_LIMIT = "5"


def _cover_url(images: Any) -> str | None:
    if not isinstance(images, dict) or not isinstance(images.get("jpg"), dict):
        return None
    jpg = images["jpg"]
    return clean_text(jpg.get("large_image_url")) or clean_text(jpg.get("image_url"))


def _authors(value: Any) -> str | None:
    names = [name for name in (clean_text(a.get("name")) for a in dict_items(value)) if name]
    return ", ".join(names) or None


def parse_manga_response(data: Any) -> list[MetadataCandidate]:
    """Map a Jikan ``/manga`` search response to manga candidates."""
    body = expect_dict(data, "search response")
    candidates: list[MetadataCandidate] = []

    for item in dict_items(body.get("data")):
        title = clean_text(item.get("title"))
        if not title:
            continue

        published = item.get("published")
        mal_id = item.get("mal_id")
        candidates.append(
            MetadataCandidate(
                source=SOURCE_NAME,
                source_id=str(mal_id) if mal_id is not None else "",
                media_type=MediaType.MANGA,
                title=title,
                title_alternatives=unique_titles(
                    [title, item.get("title_english"), item.get("title_japanese")]
                ),
                author=_authors(item.get("authors")),
                description=clean_text(item.get("synopsis")),
                cover_url=_cover_url(item.get("images")),
                year=parse_year(published.get("from")) if isinstance(published, dict) else None,
            )
        )

    return candidates


class JikanSource:
    """Metadata source backed by the Jikan v4 manga search."""

    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    @property
    def name(self) -> str:
        return SOURCE_NAME

    @property
    def media_types(self) -> frozenset[MediaType]:
        return frozenset({MediaType.MANGA})

    def search(self, query: str) -> list[MetadataCandidate]:
        """Search Jikan manga; any failure yields an empty list."""
        logger.debug("GET %s q=%r", _MANGA_URL, query)
        try:
            data = self._http.get(_MANGA_URL, params={"q": query, "limit": _RESULT_LIMIT})
        except MetadataFetchError as exc:
            logger.warning("Jikan search failed for %r: %s", query, exc)
            return []

        try:
            candidates = parse_manga_response(data)
        except MalformedResponseError as exc:
            logger.warning("Malformed Jikan response for %r: %s", query, exc)
            return []

        if candidates:
            logger.info("Jikan: %d results for %r", len(candidates), query)
        return candidates
