# ABOUTME: The `shelfmatch ls` command for listing cataloged books.
# ABOUTME: Displays a Rich table of all books in the library database.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from shelfmatch.cli.options import db_option
from shelfmatch.db.catalog import LibraryCatalog
from shelfmatch.db.connection import library_session


@click.command("ls")
@db_option
def ls(db_path: Path | None) -> None:
    """List all books in the library catalog."""
    console = Console()
    with library_session(db_path) as conn:
        records = LibraryCatalog(conn).list_all()

    if not records:
        console.print("[yellow]No books in the library.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim", width=4)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Cover", width=5)

    for record in records:
        table.add_row(
            str(record.id),
            record.title,
            record.author or "[dim]unknown[/dim]",
            "yes" if record.cover_path else "",
        )

    console.print(table)
    console.print(f"\n[dim]{len(records)} book(s)[/dim]")
