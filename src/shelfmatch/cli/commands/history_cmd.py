# ABOUTME: The `shelfmatch history` command for a book's metadata search log.
# ABOUTME: Shows every logged attempt with its source, score, and outcome.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from shelfmatch.cli.options import db_option
from shelfmatch.db.catalog import LibraryCatalog
from shelfmatch.db.connection import library_session


@click.command("history")
@click.argument("book_id", type=int)
@db_option
def history(book_id: int, db_path: Path | None) -> None:
    """Show past metadata searches for a book."""
    console = Console()
    with library_session(db_path) as conn:
        catalog = LibraryCatalog(conn)
        if catalog.get_by_id(book_id) is None:
            console.print(f"[red]Book {book_id} not found.[/red]")
            raise SystemExit(1)
        entries = catalog.list_search_results(book_id)

    if not entries:
        console.print("[yellow]No metadata searches recorded.[/yellow]")
        return

    table = Table()
    table.add_column("Date", style="dim")
    table.add_column("Source")
    table.add_column("Source ID", style="dim")
    table.add_column("Score", justify="right")
    table.add_column("Query")
    table.add_column("Applied")
    table.add_column("Confirmed")

    for entry in entries:
        table.add_row(
            entry.search_date,
            entry.source,
            entry.source_id or "",
            f"{entry.score:.1f}",
            entry.search_query or "[dim](manual pick)[/dim]",
            "yes" if entry.applied else "no",
            "yes" if entry.confirmed else "no",
        )

    console.print(table)
