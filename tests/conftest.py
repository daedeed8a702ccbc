# ABOUTME: Shared pytest fixtures for shelfmatch tests.
# ABOUTME: Provides temporary library databases, catalogs, and a sample manga folder.

import sqlite3
from collections.abc import Iterator
from pathlib import Path

import pytest

from shelfmatch.db.catalog import LibraryCatalog
from shelfmatch.db.connection import open_library


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path."""
    return tmp_path / "library.db"


@pytest.fixture
def conn(db_path: Path) -> Iterator[sqlite3.Connection]:
    """An open library database with the full schema applied."""
    connection = open_library(db_path)
    yield connection
    connection.close()


@pytest.fixture
def catalog(conn: sqlite3.Connection) -> LibraryCatalog:
    """A LibraryCatalog over a fresh temporary database."""
    return LibraryCatalog(conn)


@pytest.fixture
def manga_dir(tmp_path: Path) -> Path:
    """A manga folder with two volume folders of chapter archives.

    Layout:
        One Piece/
            Vol 01/ Chapter 1.cbz, Chapter 2.cbz, Chapter 10.cbz
            Vol 02/ Chapter 11.cbz
            cover.jpg
    """
    root = tmp_path / "One Piece"
    vol1 = root / "Vol 01"
    vol2 = root / "Vol 02"
    vol1.mkdir(parents=True)
    vol2.mkdir()
    for name in ("Chapter 1.cbz", "Chapter 2.cbz", "Chapter 10.cbz"):
        (vol1 / name).write_bytes(b"PK")
    (vol2 / "Chapter 11.cbz").write_bytes(b"PK")
    (root / "cover.jpg").write_bytes(b"\xff\xd8")
    return root
