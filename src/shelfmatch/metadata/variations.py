# ABOUTME: Builds the ordered list of search queries tried for one book.
# ABOUTME: Draws on title, file path, author, and chapter names/paths, with acronym expansion.

import logging
import re
from collections.abc import Sequence
from pathlib import PurePath

from shelfmatch.metadata.normalizer import normalize

logger = logging.getLogger(__name__)

# Common series acronyms -> full title.
_ACRONYMS: dict[str, str] = {
    "got": "game of thrones",
    "asoiaf": "a song of ice and fire",
    "lotr": "lord of the rings",
    "hp": "harry potter",
    "twot": "the wheel of time",
    "wot": "wheel of time",
    "tbate": "the beginning after the end",
}
_ACRONYM_RE = re.compile(r"^[a-z]{2,6}$")

_LEADING_ARTICLES = ("a ", "the ", "o ", "os ", "as ", "um ", "uma ", "an ")

# Articles and prepositions (English and Portuguese) dropped from keyword queries.
_STOP_WORDS = frozenset(
    {
        "a", "o", "e", "de", "da", "do", "das", "dos", "um", "uma", "os", "as",
        "the", "an", "of", "and", "or", "in", "on", "to", "for", "no", "na",
        "em", "com", "por", "para",
    }
)

_SEPARATOR_RE = re.compile(r"[:\-–—]")
_SEGMENT_SPLITS = (" - ", " _ ")

_MAX_KEYWORDS = 5
_MAX_CHAPTER_NAMES = 15
_MAX_CHAPTER_PATHS = 20
_MIN_SEGMENT_LENGTH = 4


class _VariationList:
    """Ordered set of query strings; each addition may also add its acronym expansion."""

    def __init__(self) -> None:
        self._items: list[str] = []

    def add(self, query: str, *, expand: bool = True) -> None:
        query = query.strip()
        if not query:
            return
        if query not in self._items:
            self._items.append(query)
        if expand:
            expanded = expand_acronym(query)
            if expanded and expanded not in self._items:
                self._items.append(expanded)

    def to_list(self) -> list[str]:
        return list(self._items)


def expand_acronym(text: str) -> str | None:
    """Return the full title for a known acronym like "lotr", or None."""
    key = text.strip().lower()
    if not _ACRONYM_RE.match(key):
        return None
    return _ACRONYMS.get(key)


def strip_leading_article(text: str) -> str:
    """Drop a single leading article ("the", "a", "o", "uma", ...)."""
    lower = text.strip().lower()
    for article in _LEADING_ARTICLES:
        if lower.startswith(article):
            return lower[len(article):].strip()
    return lower


def before_separator(text: str) -> str:
    """Text before the first ':', '-', en dash, or em dash.

    Returns the input unchanged when there is no separator or nothing
    precedes it.
    """
    match = _SEPARATOR_RE.search(text)
    if match:
        head = text[: match.start()].strip()
        if head:
            return head
    return text


def extract_keywords(text: str, max_words: int = _MAX_KEYWORDS) -> str:
    """First ``max_words`` non-stop-word tokens, in their original order."""
    words = [w for w in text.split() if w.lower() not in _STOP_WORDS]
    return " ".join(words[:max_words])


def _is_useful_segment(norm: str) -> bool:
    return len(norm) >= _MIN_SEGMENT_LENGTH and not norm.isdigit()


def _split_segments(text: str) -> list[str]:
    """Parts of "Author - Title - 001" style names, split on " - " then on " _ "."""
    segments: list[str] = []
    for splitter in _SEGMENT_SPLITS:
        segments.extend(text.split(splitter))
    return segments


def _path_components(path: str) -> list[str]:
    """Named components of a path, without root or drive."""
    pure = PurePath(path)
    parts = pure.parts
    if pure.anchor and parts and parts[0] == pure.anchor:
        parts = parts[1:]
    return [p for p in parts if p not in ("", ".", "..")]


def _title_variations(variations: _VariationList, title: str, normalized: str) -> None:
    variations.add(normalized)

    without_article = strip_leading_article(normalized)
    if without_article and without_article != normalized:
        variations.add(without_article)

    main_title = normalize(before_separator(title))
    if main_title and main_title != normalized:
        variations.add(main_title)

    keywords = extract_keywords(normalized)
    if keywords and keywords != normalized:
        variations.add(keywords)


def path_variations(path: str) -> list[str]:
    """Queries derived from a book's file or folder path.

    Up to three from the base name (whole, before separator, keywords), then
    the parent folder name and "parent basename" (e.g. "berserk chapter 001").
    """
    pure = PurePath(path)
    found: list[str] = []

    stem = pure.stem
    norm_stem = normalize(stem)
    if norm_stem:
        found.append(norm_stem)
        main = normalize(before_separator(stem))
        if main and main != norm_stem and main not in found:
            found.append(main)
        keywords = extract_keywords(norm_stem)
        if keywords and keywords != norm_stem and keywords not in found:
            found.append(keywords)

    parent_name = pure.parent.name
    if parent_name:
        norm_parent = normalize(parent_name)
        if norm_parent:
            if norm_parent not in found:
                found.append(norm_parent)
            combined = f"{norm_parent} {norm_stem}".strip()
            if combined != norm_parent and combined not in found:
                found.append(combined)

    return found


def _chapter_name_variations(variations: _VariationList, name: str) -> None:
    if len(normalize(name)) < 3:
        return

    keywords = extract_keywords(normalize(before_separator(name)))
    if len(keywords) >= _MIN_SEGMENT_LENGTH:
        variations.add(keywords)

    for segment in _split_segments(name):
        segment = segment.strip()
        if len(segment) < 3:
            continue
        norm = normalize(segment)
        if _is_useful_segment(norm):
            variations.add(norm)


def _chapter_path_variations(variations: _VariationList, path: str) -> None:
    for component in _path_components(path):
        stem = PurePath(component).stem or component
        for segment in _split_segments(stem):
            segment = segment.strip()
            if not segment:
                continue
            norm = normalize(segment)
            if _is_useful_segment(norm):
                variations.add(norm)
        norm = normalize(stem)
        if _is_useful_segment(norm):
            variations.add(norm)


def generate_variations(
    title: str,
    path: str | None = None,
    author: str | None = None,
    chapter_names: Sequence[str] | None = None,
    chapter_paths: Sequence[str] | None = None,
) -> list[str]:
    """Generate distinct search queries for a book, most promising first.

    Order: title forms, path forms, chapter names, chapter paths, then
    "title author". An empty list means there is nothing usable to search.
    """
    variations = _VariationList()

    normalized = normalize(title)
    if normalized:
        _title_variations(variations, title, normalized)

    if path:
        for query in path_variations(path):
            variations.add(query)

    for name in (chapter_names or [])[:_MAX_CHAPTER_NAMES]:
        _chapter_name_variations(variations, name)

    for chapter_path in (chapter_paths or [])[:_MAX_CHAPTER_PATHS]:
        _chapter_path_variations(variations, chapter_path)

    if normalized and author:
        norm_author = normalize(author)
        if norm_author:
            variations.add(f"{normalized} {norm_author}", expand=False)

    result = variations.to_list()
    logger.debug("Generated %d search variations for %r", len(result), title)
    return result
