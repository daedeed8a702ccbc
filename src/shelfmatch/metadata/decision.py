# ABOUTME: Auto-apply policy: whether a scored candidate is confident enough to write.
# ABOUTME: Scores at or above the threshold are "confirmed"; apply mirrors confirmed.

from shelfmatch.metadata.types import MetadataCandidate, MetadataDecision

# Minimum score for applying a candidate without asking the user.
SCORE_THRESHOLD = 65.0


def is_confirmed(score: float) -> bool:
    """Whether a score meets the auto-apply threshold."""
    return score >= SCORE_THRESHOLD


def apply_metadata_decision(candidate: MetadataCandidate, score: float) -> MetadataDecision:
    """Build the decision for a single surviving candidate."""
    confirmed = is_confirmed(score)
    return MetadataDecision(apply=confirmed, confirmed=confirmed, score=score, candidate=candidate)
