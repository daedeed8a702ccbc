# ABOUTME: CLI package for shelfmatch, built on Click.
# ABOUTME: Defines the root command group, logging verbosity, and registers subcommands.

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from shelfmatch.cli.commands import add_cmd, history_cmd, lookup_cmd, ls_cmd, search_cmd


def configure_logging(verbosity: int) -> None:
    """Route shelfmatch logs through Rich on stderr.

    0 shows warnings only, 1 adds INFO, 2 or more adds DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    package_logger = logging.getLogger("shelfmatch")
    package_logger.handlers = [handler]
    package_logger.setLevel(level)


@click.group()
@click.version_option(package_name="shelfmatch")
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Show progress logs (-v) or debug logs (-vv).",
)
def cli(verbose: int) -> None:
    """shelfmatch - find and apply metadata for your books, comics, and manga."""
    configure_logging(verbose)


cli.add_command(add_cmd.add)
cli.add_command(ls_cmd.ls)
cli.add_command(search_cmd.search)
cli.add_command(lookup_cmd.lookup)
cli.add_command(history_cmd.history)
