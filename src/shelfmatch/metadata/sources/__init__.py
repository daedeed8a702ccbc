# ABOUTME: External catalog adapters and the default ordered source set.
# ABOUTME: Books come from Open Library and LoC, manga from AniList and Jikan; anime is opt-in.

from contextlib import ExitStack
from typing import Any

from shelfmatch.metadata.http import ShelfmatchHttpClient
from shelfmatch.metadata.provider import MetadataSource
from shelfmatch.metadata.sources import anilist, jikan, kitsu, loc, openlibrary
from shelfmatch.metadata.sources.anilist import AniListSource
from shelfmatch.metadata.sources.jikan import JikanSource
from shelfmatch.metadata.sources.kitsu import KitsuSource
from shelfmatch.metadata.sources.loc import LocSource
from shelfmatch.metadata.sources.openlibrary import OpenLibrarySource

__all__ = [
    "AniListSource",
    "JikanSource",
    "KitsuSource",
    "LocSource",
    "OpenLibrarySource",
    "default_sources",
]


def default_sources(
    *, include_anime: bool = False, stack: ExitStack | None = None
) -> list[MetadataSource]:
    """Build the registered sources, each with its own HTTP client and timeout.

    Order matters: it is the discovery order used to break score ties.

    Args:
        include_anime: Also register Kitsu.
        stack: When given, every HTTP client is entered into it and closed
            when the stack unwinds.
    """

    def client(**kwargs: Any) -> ShelfmatchHttpClient:
        http = ShelfmatchHttpClient(**kwargs)
        return stack.enter_context(http) if stack is not None else http

    sources: list[MetadataSource] = [
        OpenLibrarySource(client(timeout=openlibrary.TIMEOUT)),
        LocSource(client(timeout=loc.TIMEOUT)),
        AniListSource(client(timeout=anilist.TIMEOUT)),
        JikanSource(
            client(timeout=jikan.TIMEOUT, min_request_interval=jikan.MIN_REQUEST_INTERVAL)
        ),
    ]
    if include_anime:
        sources.append(KitsuSource(client(timeout=kitsu.TIMEOUT)))
    return sources
