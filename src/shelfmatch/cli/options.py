# ABOUTME: Shared Click options for shelfmatch CLI commands.
# ABOUTME: Database/covers paths, cache controls, and source selection.

import logging
import sqlite3
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from shelfmatch.core.resolver import DEFAULT_COVERS_DIR
from shelfmatch.db.connection import DEFAULT_DB_PATH
from shelfmatch.metadata.cache import DEFAULT_CACHE_TTL_SECS, SearchCache

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 24 * 3600

db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(path_type=Path),
    default=None,
    help=f"Path to library database (default: {DEFAULT_DB_PATH})",
)

covers_dir_option = click.option(
    "--covers-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help=f"Where downloaded covers are stored (default: {DEFAULT_COVERS_DIR})",
)


def search_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that queries metadata sources."""
    func = click.option(
        "--include-anime",
        is_flag=True,
        default=False,
        help="Also query Kitsu (anime entries are scored but never listed).",
    )(func)
    func = click.option(
        "--no-cache",
        is_flag=True,
        default=False,
        help="Query every source live instead of using cached results.",
    )(func)
    func = click.option(
        "--cache-ttl-days",
        type=click.IntRange(min=1),
        default=DEFAULT_CACHE_TTL_SECS // _SECONDS_PER_DAY,
        show_default=True,
        help="Days before a cached provider response is refreshed.",
    )(func)
    return func


def make_cache(
    conn: sqlite3.Connection, cache_ttl_days: int, no_cache: bool
) -> SearchCache | None:
    """The result cache selected by the command-line flags, with stale entries removed."""
    if no_cache:
        return None
    cache = SearchCache(conn, ttl_seconds=cache_ttl_days * _SECONDS_PER_DAY)
    purged = cache.purge_expired()
    if purged:
        logger.info("Purged %d expired cache entries", purged)
    return cache
