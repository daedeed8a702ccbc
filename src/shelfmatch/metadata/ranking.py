# ABOUTME: Filters and orders scored candidates into the short list shown to the user.
# ABOUTME: Drops anime and low scores, caps the list, and decides when to auto-apply.

from collections.abc import Iterable

from shelfmatch.metadata.decision import apply_metadata_decision
from shelfmatch.metadata.types import (
    MediaType,
    MetadataCandidate,
    MetadataDecision,
    RankedCandidate,
)

MIN_SCORE = 55.0
MAX_CANDIDATES = 5


def rank_candidates(scored: Iterable[tuple[MetadataCandidate, float]]) -> list[RankedCandidate]:
    """Sort by score descending and keep the best non-anime candidates.

    The sort is stable, so equal scores keep discovery order. Candidates
    below MIN_SCORE are dropped and at most MAX_CANDIDATES are returned.
    """
    ordered = sorted(scored, key=lambda pair: pair[1], reverse=True)
    ranked = [
        RankedCandidate(candidate=candidate, score=score)
        for candidate, score in ordered
        if candidate.media_type is not MediaType.ANIME and score >= MIN_SCORE
    ]
    return ranked[:MAX_CANDIDATES]


def build_decision(ranked: list[RankedCandidate]) -> MetadataDecision | None:
    """Decide automatically only when exactly one candidate survived ranking.

    With several survivors the caller must let the user choose.
    """
    if len(ranked) != 1:
        return None
    best = ranked[0]
    return apply_metadata_decision(best.candidate, best.score)
