# ABOUTME: The `shelfmatch lookup` command for trying the metadata search without a catalog entry.
# ABOUTME: Prints the ranked candidates and whether the best one would be auto-applied.

from contextlib import ExitStack
from pathlib import Path

import click
from rich.console import Console

from shelfmatch.cli.options import db_option, make_cache, search_options
from shelfmatch.cli.review import candidate_table
from shelfmatch.db.connection import library_session
from shelfmatch.metadata.provider import MetadataSource
from shelfmatch.metadata.search import search_metadata
from shelfmatch.metadata.sources import default_sources


def _create_sources(stack: ExitStack, include_anime: bool) -> list[MetadataSource]:
    """Create the default metadata sources; their clients close with the stack."""
    return default_sources(include_anime=include_anime, stack=stack)


@click.command("lookup")
@click.argument("title")
@click.option("--author", default=None, help="Author to match against.")
@click.option("--path", "book_path", default=None, help="File or folder path to mine for hints.")
@db_option
@search_options
def lookup(
    title: str,
    author: str | None,
    book_path: str | None,
    db_path: Path | None,
    cache_ttl_days: int,
    no_cache: bool,
    include_anime: bool,
) -> None:
    """Search metadata sources for TITLE and show the ranked matches."""
    console = Console()
    with ExitStack() as stack:
        sources = _create_sources(stack, include_anime)
        cache = None
        if not no_cache:
            conn = stack.enter_context(library_session(db_path))
            cache = make_cache(conn, cache_ttl_days, no_cache)
        result = search_metadata(
            title, path=book_path, author=author, sources=sources, cache=cache
        )

    if result is None:
        console.print("[yellow]No metadata found.[/yellow]")
        return

    console.print(f"[dim]Query:[/dim] {result.search_query_used}")
    console.print(candidate_table(result.ranked_candidates))

    decision = result.decision
    if decision is None:
        console.print("[yellow]Several candidates; a manual choice is needed.[/yellow]")
    elif decision.apply:
        console.print(
            f"[green]Would apply[/green] {decision.candidate.title} "
            f"[dim](score {decision.score:.1f})[/dim]"
        )
    else:
        console.print(
            f"[yellow]Below the auto-apply threshold[/yellow] "
            f"[dim](score {decision.score:.1f})[/dim]"
        )
