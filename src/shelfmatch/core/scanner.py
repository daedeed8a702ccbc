# ABOUTME: Builds a catalog entry (title plus ordered chapters) from a file or folder.
# ABOUTME: Sub-folders become volumes; supported files inside them become chapters.

import re
from dataclasses import dataclass, field
from pathlib import Path

CHAPTER_EXTENSIONS: frozenset[str] = frozenset(
    {".epub", ".mobi", ".azw3", ".azw", ".pdf", ".txt", ".cbz", ".cbr", ".cb7", ".zip"}
)

# Matches a trailing parenthesized Calibre ID like " (2739)" at end of string
_CALIBRE_ID_RE = re.compile(r"\s+\(\d+\)$")
_DIGITS_RE = re.compile(r"(\d+)")


@dataclass
class ScannedChapter:
    """A chapter file found while scanning, with its position in reading order."""

    volume_index: int
    chapter_index: int
    name: str
    path: Path


@dataclass
class ScannedBook:
    """What `add` stores for a path before any metadata search."""

    title: str
    source_path: Path
    chapters: list[ScannedChapter] = field(default_factory=list)


def _natural_key(path: Path) -> list[int | str]:
    """Sort key that orders "Chapter 2" before "Chapter 10"."""
    return [int(part) if part.isdigit() else part.lower() for part in _DIGITS_RE.split(path.name)]


def _chapter_files(directory: Path) -> list[Path]:
    return sorted(
        (p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in CHAPTER_EXTENSIONS),
        key=_natural_key,
    )


def title_from_path(path: Path) -> str:
    """Folder name without a Calibre id, or a file's stem."""
    if path.is_dir():
        return _CALIBRE_ID_RE.sub("", path.name) or path.name
    return path.stem


def scan_book_path(path: Path) -> ScannedBook:
    """Describe a single book file or a book folder.

    A folder's own files form volume 0; each sub-folder (in natural order)
    that holds supported files is the next volume. A single file has no
    chapters.

    Args:
        path: A book file or folder.

    Returns:
        The inferred title and chapters.

    Raises:
        FileNotFoundError: If path does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"No such file or directory: {path}")

    book = ScannedBook(title=title_from_path(path), source_path=path)
    if not path.is_dir():
        return book

    volumes = [path, *sorted((p for p in path.iterdir() if p.is_dir()), key=_natural_key)]
    volume_index = 0
    for volume_dir in volumes:
        files = _chapter_files(volume_dir)
        if not files:
            continue
        for chapter_index, file in enumerate(files):
            book.chapters.append(
                ScannedChapter(
                    volume_index=volume_index,
                    chapter_index=chapter_index,
                    name=file.stem,
                    path=file,
                )
            )
        volume_index += 1

    return book
