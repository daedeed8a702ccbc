# ABOUTME: The `shelfmatch add` command for cataloging a book file or folder.
# ABOUTME: Stores the inferred title and discovers chapters from the folder's files.

from pathlib import Path

import click
from rich.console import Console

from shelfmatch.cli.options import db_option
from shelfmatch.core.scanner import scan_book_path
from shelfmatch.db.catalog import LibraryCatalog
from shelfmatch.db.connection import library_session


@click.command("add")
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.option("--title", default=None, help="Title to store (default: inferred from the path).")
@click.option("--author", default=None, help="Author to store, if known.")
@db_option
def add(path: Path, title: str | None, author: str | None, db_path: Path | None) -> None:
    """Add a book file or folder to the catalog."""
    console = Console()
    scanned = scan_book_path(path.resolve())

    with library_session(db_path) as conn:
        catalog = LibraryCatalog(conn)
        book_id = catalog.add_book(
            title or scanned.title,
            author=author,
            source_path=scanned.source_path,
        )
        for chapter in scanned.chapters:
            catalog.add_chapter(
                book_id,
                chapter.name,
                path=chapter.path,
                volume_index=chapter.volume_index,
                chapter_index=chapter.chapter_index,
            )

    console.print(
        f"[green]Added[/green] #{book_id} {title or scanned.title} "
        f"[dim]({len(scanned.chapters)} chapter(s))[/dim]"
    )
