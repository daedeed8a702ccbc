# ABOUTME: Metadata package: search variations, provider querying, scoring, and decisions.
# ABOUTME: Exports the core data types and the search entry point.

from shelfmatch.metadata.normalizer import normalize
from shelfmatch.metadata.provider import MetadataSource
from shelfmatch.metadata.search import search_metadata
from shelfmatch.metadata.types import (
    BookMetadataState,
    MediaType,
    MetadataCandidate,
    MetadataDecision,
    RankedCandidate,
    SearchResult,
)

__all__ = [
    "BookMetadataState",
    "MediaType",
    "MetadataCandidate",
    "MetadataDecision",
    "MetadataSource",
    "RankedCandidate",
    "SearchResult",
    "normalize",
    "search_metadata",
]
