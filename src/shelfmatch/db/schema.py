# ABOUTME: SQL DDL statements for the shelfmatch library database schema.
# ABOUTME: Defines the catalog tables, metadata flags, provenance log, and cache migration.

SCHEMA_V1 = """
-- Core catalog table
CREATE TABLE books (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    title         TEXT NOT NULL,
    author        TEXT,
    description   TEXT,
    cover_path    TEXT,
    source_path   TEXT,
    date_added    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    date_modified TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

CREATE INDEX idx_books_source_path ON books(source_path) WHERE source_path IS NOT NULL;

CREATE TABLE chapters (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    book_id       INTEGER NOT NULL REFERENCES books(id) ON DELETE CASCADE,
    volume_index  INTEGER NOT NULL DEFAULT 0,
    chapter_index INTEGER NOT NULL DEFAULT 0,
    name          TEXT NOT NULL,
    path          TEXT
);

CREATE INDEX idx_chapters_book ON chapters(book_id, volume_index, chapter_index);

-- Fields the user edited by hand; automatic resolution must not overwrite them
CREATE TABLE book_metadata_flags (
    book_id                     INTEGER PRIMARY KEY REFERENCES books(id) ON DELETE CASCADE,
    author_manually_edited      INTEGER NOT NULL DEFAULT 0,
    description_manually_edited INTEGER NOT NULL DEFAULT 0,
    cover_manually_edited       INTEGER NOT NULL DEFAULT 0,
    title_manually_edited       INTEGER NOT NULL DEFAULT 0
);

-- One row per resolution attempt that produced a result
CREATE TABLE metadata_search_results (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    book_id      INTEGER NOT NULL REFERENCES books(id) ON DELETE CASCADE,
    source       TEXT NOT NULL,
    source_id    TEXT,
    score        REAL NOT NULL,
    search_query TEXT NOT NULL,
    search_date  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    applied      INTEGER NOT NULL DEFAULT 0,
    confirmed    INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX idx_search_results_book ON metadata_search_results(book_id);

-- Schema versioning for future migrations
CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""

MIGRATION_V2 = """
-- Per-provider result cache keyed by query variation
CREATE TABLE IF NOT EXISTS metadata_search_cache (
    source       TEXT NOT NULL,
    query        TEXT NOT NULL,
    results_json TEXT NOT NULL,
    cached_at    INTEGER NOT NULL,
    PRIMARY KEY (source, query)
);

INSERT INTO schema_version (version) VALUES (2);
"""

MIGRATIONS: list[tuple[int, str]] = [
    (2, MIGRATION_V2),
]
