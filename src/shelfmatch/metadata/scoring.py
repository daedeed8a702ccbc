# ABOUTME: Confidence scoring (0-100) of metadata candidates against the book being searched.
# ABOUTME: Weighted title/author/field-presence comparison plus media-type adjustments.

from dataclasses import dataclass

from shelfmatch.metadata.normalizer import contains_cjk_script, normalize
from shelfmatch.metadata.types import MediaType, MetadataCandidate

# Match weights; they sum to 1.0
_WEIGHT_TITLE = 0.40
_WEIGHT_AUTHOR = 0.25
_WEIGHT_YEAR = 0.15
_WEIGHT_LANGUAGE = 0.10
_WEIGHT_COVER = 0.05
_WEIGHT_DESCRIPTION = 0.05

# Year and language are not compared yet; both contribute a fixed neutral value.
_NEUTRAL_SCORE = 50.0

# Title containment floor (e.g. "one piece" inside "one piece vol 01").
_CONTAINMENT_FLOOR = 90.0
_PARTIAL_AUTHOR_SCALE = 80.0

_MANGA_CJK_BOOST = 15.0
_ANIME_WESTERN_PENALTY = -40.0

# Words that suggest a Western novel title ("a song of ice and fire").
_BOOK_INDICATORS = frozenset(
    {
        "of", "and", "the", "song", "fire", "ice", "king", "queen", "lord",
        "rings", "chronicles", "saga", "tale", "tales", "storm", "sword",
        "dragon", "dungeon",
    }
)


@dataclass(frozen=True)
class ScoreContext:
    """Per-search facts shared by every candidate score."""

    is_cjk: bool = False

    @classmethod
    def from_search(cls, title: str, path: str | None = None) -> "ScoreContext":
        """Detect Japanese/Chinese script in the searched title or its path."""
        return cls(is_cjk=contains_cjk_script(title) or bool(path and contains_cjk_script(path)))


def looks_like_western_book(normalized_title: str) -> bool:
    """At least two words, one of them book-ish, and no digits."""
    words = normalized_title.split()
    if len(words) < 2:
        return False
    has_book_word = any(w in _BOOK_INDICATORS for w in words)
    has_digit = any(c.isdigit() for c in normalized_title)
    return has_book_word and not has_digit


def title_score(candidate: MetadataCandidate, normalized_search: str) -> float:
    """Best Jaccard word overlap (x100) across the candidate's titles.

    Containment of either normalized string in the other floors the
    contribution at 90.
    """
    if not normalized_search:
        return 0.0
    search_words = set(normalized_search.split())
    best = 0.0
    for alt in (*candidate.title_alternatives, candidate.title):
        norm_alt = normalize(alt)
        alt_words = set(norm_alt.split())
        if not alt_words:
            continue
        jaccard = len(search_words & alt_words) / len(search_words | alt_words)
        best = max(best, jaccard * 100.0)
        if normalized_search in norm_alt or norm_alt in normalized_search:
            best = max(best, _CONTAINMENT_FLOOR)
    return best


def author_score(candidate: MetadataCandidate, search_author: str | None) -> float:
    """Compare authors; a missing side is neutral unless only the search has one."""
    candidate_author = normalize(candidate.author) if candidate.author else ""
    wanted = normalize(search_author) if search_author else ""

    if candidate_author and wanted:
        if wanted in candidate_author or candidate_author in wanted:
            return 100.0
        wanted_words = set(wanted.split())
        overlap = len(set(candidate_author.split()) & wanted_words)
        return overlap / max(len(wanted_words), 1) * _PARTIAL_AUTHOR_SCALE
    if candidate_author:
        return _NEUTRAL_SCORE
    if wanted:
        return 0.0
    return _NEUTRAL_SCORE


def media_type_adjustment(
    media_type: MediaType, is_cjk: bool, normalized_search: str
) -> float:
    """Boost manga for CJK content; penalize anime for Western-looking book titles."""
    if media_type is MediaType.MANGA:
        return _MANGA_CJK_BOOST if is_cjk else 0.0
    if media_type is MediaType.ANIME:
        if is_cjk:
            return 0.0
        if looks_like_western_book(normalized_search):
            return _ANIME_WESTERN_PENALTY
    return 0.0


def score_candidate(
    candidate: MetadataCandidate,
    search_title: str,
    search_author: str | None = None,
    context: ScoreContext | None = None,
) -> float:
    """Score how well a candidate matches the original title and author.

    Always scores against the un-varied title, whichever variation found the
    candidate. Returns a float clamped to [0.0, 100.0].
    """
    if context is None:
        context = ScoreContext.from_search(search_title)
    normalized_search = normalize(search_title)

    base = (
        _WEIGHT_TITLE * title_score(candidate, normalized_search)
        + _WEIGHT_AUTHOR * author_score(candidate, search_author)
        + _WEIGHT_YEAR * _NEUTRAL_SCORE
        + _WEIGHT_LANGUAGE * _NEUTRAL_SCORE
        + _WEIGHT_COVER * (100.0 if candidate.cover_url else 0.0)
        + _WEIGHT_DESCRIPTION * (100.0 if candidate.description else 0.0)
    )
    base = min(base, 100.0)

    adjustment = media_type_adjustment(candidate.media_type, context.is_cjk, normalized_search)
    return max(0.0, min(100.0, base + adjustment))
