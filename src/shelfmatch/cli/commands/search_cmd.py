# ABOUTME: The `shelfmatch search` command for resolving a cataloged book's metadata.
# ABOUTME: Auto-applies a confident single match, otherwise lets the user pick.

from contextlib import ExitStack
from pathlib import Path

import click
from rich.console import Console

from shelfmatch.cli.options import covers_dir_option, db_option, make_cache, search_options
from shelfmatch.cli.review import ReviewSession, candidate_table
from shelfmatch.core.resolver import (
    DEFAULT_COVERS_DIR,
    BookNotFoundError,
    MetadataResolver,
    SearchOutcome,
)
from shelfmatch.db.catalog import LibraryCatalog
from shelfmatch.db.connection import library_session
from shelfmatch.metadata.cover import CoverStore
from shelfmatch.metadata.http import ShelfmatchHttpClient
from shelfmatch.metadata.provider import MetadataSource
from shelfmatch.metadata.sources import default_sources


def _create_sources(stack: ExitStack, include_anime: bool) -> list[MetadataSource]:
    """Create the default metadata sources; their clients close with the stack."""
    return default_sources(include_anime=include_anime, stack=stack)


def _print_outcome(console: Console, outcome: SearchOutcome) -> None:
    if outcome.applied:
        console.print(
            f"[green]Applied[/green] {outcome.title} "
            f"[dim]({outcome.source}, score {outcome.score:.1f})[/dim]"
        )
        return
    if outcome.confirmed:
        console.print(
            f"[yellow]Several matches;[/yellow] best is {outcome.title} "
            f"[dim]({outcome.source}, score {outcome.score:.1f})[/dim]"
        )
    else:
        console.print(
            f"[yellow]No confident match;[/yellow] best is {outcome.title} "
            f"[dim]({outcome.source}, score {outcome.score:.1f})[/dim]"
        )


@click.command("search")
@click.argument("book_id", type=int)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Never prompt; only confident single matches are applied.",
)
@db_option
@covers_dir_option
@search_options
def search(
    book_id: int,
    quiet: bool,
    db_path: Path | None,
    covers_dir: Path | None,
    cache_ttl_days: int,
    no_cache: bool,
    include_anime: bool,
) -> None:
    """Search metadata sources for a cataloged book."""
    console = Console()
    with ExitStack() as stack:
        conn = stack.enter_context(library_session(db_path))
        cover_client = stack.enter_context(ShelfmatchHttpClient())
        catalog = LibraryCatalog(conn)
        resolver = MetadataResolver(
            catalog,
            _create_sources(stack, include_anime),
            CoverStore(covers_dir or DEFAULT_COVERS_DIR, cover_client),
            cache=make_cache(conn, cache_ttl_days, no_cache),
        )

        try:
            outcome = resolver.search(book_id)
        except BookNotFoundError as exc:
            console.print(f"[red]Book {book_id} not found.[/red]")
            raise SystemExit(1) from exc

        if not outcome.ranked_candidates:
            console.print("[yellow]No metadata found.[/yellow]")
            return

        _print_outcome(console, outcome)
        if outcome.applied:
            return

        if quiet:
            console.print(candidate_table(outcome.ranked_candidates))
            return

        book = catalog.get_by_id(book_id)
        assert book is not None
        picked = ReviewSession(console=console).review(book, outcome.ranked_candidates)
        if picked is None:
            console.print("[dim]Skipped.[/dim]")
            return

        updated = resolver.apply_candidate(book_id, picked)
        console.print(f"[green]Applied[/green] {updated.title} [dim]({picked.source})[/dim]")
