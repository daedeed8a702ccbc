# ABOUTME: Canonicalizes titles, authors, and filenames into a comparable token form.
# ABOUTME: Folds accents, strips edition/volume phrases and punctuation, detects CJK script.

import re
import unicodedata

# Edition and volume phrases in English and Portuguese. Applied after
# lowercasing and accent folding, so "edição" arrives as "edicao".
_EDITION_RE = re.compile(
    r"\b(?:"
    r"\d+\s*(?:st|nd|rd|th|ª|º|°|a|o)?\s*(?:edition|edicao|ed)(?![a-z])\.?"
    r"|revised\s+edition(?![a-z])"
    r"|ed(?![a-z])\.?\s*\d+"
    r"|vol(?:ume)?(?![a-z])\.?\s*\d+"
    r")"
)
_WHITESPACE_RE = re.compile(r"\s+")

# (first, last) code points of Hiragana, Katakana and basic CJK ideographs.
_CJK_RANGES = (
    (0x3040, 0x309F),
    (0x30A0, 0x30FF),
    (0x4E00, 0x9FFF),
)


def _fold_accents(text: str) -> str:
    """Replace accented Latin letters with their ASCII base letter.

    Combining marks are dropped only when they follow an ASCII letter, so
    kana voicing marks and other scripts survive recomposition.
    """
    out: list[str] = []
    for ch in unicodedata.normalize("NFD", text):
        if unicodedata.combining(ch) and out and out[-1].isascii() and out[-1].isalpha():
            continue
        out.append(ch)
    return unicodedata.normalize("NFC", "".join(out))


def _strip_editions(text: str) -> str:
    """Remove edition/volume phrases until none remain."""
    while True:
        stripped = _EDITION_RE.sub(" ", text)
        if stripped == text:
            return text
        text = stripped


def normalize(text: str) -> str:
    """Normalize a string for searching and comparison.

    1. Lowercase
    2. Fold accented Latin letters to ASCII
    3. Remove edition/volume phrases
    4. Replace anything that is not alphanumeric or whitespace with a space
    5. Remove edition/volume phrases exposed by step 4
    6. Collapse whitespace and trim

    An empty result means there is nothing to search for.
    """
    if not text:
        return ""
    result = _fold_accents(text.lower())
    result = _strip_editions(result)
    result = "".join(c if c.isalnum() or c.isspace() else " " for c in result)
    result = _strip_editions(result)
    return _WHITESPACE_RE.sub(" ", result).strip()


def contains_cjk_script(text: str) -> bool:
    """Whether any character is Hiragana, Katakana, or a basic CJK ideograph."""
    for ch in text:
        code = ord(ch)
        if any(first <= code <= last for first, last in _CJK_RANGES):
            return True
    return False
