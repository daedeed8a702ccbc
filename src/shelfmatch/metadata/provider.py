# ABOUTME: MetadataSource protocol defining the contract for external catalogs.
# ABOUTME: Open Library, Library of Congress, AniList, Jikan, and Kitsu implement this.

from typing import Protocol, runtime_checkable

from shelfmatch.metadata.types import MediaType, MetadataCandidate


@runtime_checkable
class MetadataSource(Protocol):
    """Protocol for a searchable metadata catalog.

    ``search`` must never raise: transport failures, timeouts and malformed
    payloads are logged by the implementation and reported as an empty list.
    Implementations are called concurrently from worker threads.
    """

    @property
    def name(self) -> str: ...

    @property
    def media_types(self) -> frozenset[MediaType]: ...

    def search(self, query: str) -> list[MetadataCandidate]: ...
