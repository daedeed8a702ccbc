# ABOUTME: Interactive review of ranked metadata candidates for one book.
# ABOUTME: Displays candidates in a Rich table and prompts the user to choose.

import click
from rich.console import Console
from rich.table import Table

from shelfmatch.db.mapping import BookRecord
from shelfmatch.metadata.types import MetadataCandidate, RankedCandidate

_EMPTY = "-"
_DESCRIPTION_PREVIEW = 300


def candidate_table(ranked: list[RankedCandidate], title: str = "Candidates") -> Table:
    """Rich table of ranked candidates, numbered from 1."""
    table = Table(title=title)
    table.add_column("#", style="bold", width=3)
    table.add_column("Title")
    table.add_column("Author")
    table.add_column("Year", width=5)
    table.add_column("Type", width=6)
    table.add_column("Source", style="dim")
    table.add_column("Score", justify="right")

    for i, entry in enumerate(ranked, start=1):
        candidate = entry.candidate
        table.add_row(
            str(i),
            candidate.title,
            candidate.author or _EMPTY,
            str(candidate.year) if candidate.year else _EMPTY,
            candidate.media_type.value,
            candidate.source,
            f"{entry.score:.1f}",
        )
    return table


class ReviewSession:
    """Lets the user pick one of several ranked candidates, or skip."""

    def __init__(self, *, console: Console | None = None) -> None:
        self._console = console or Console()

    def review(
        self, book: BookRecord, ranked: list[RankedCandidate]
    ) -> MetadataCandidate | None:
        """Present candidates and return the one the user accepted, if any."""
        if not ranked:
            return None

        self._console.print(f"\n[bold]Current:[/bold] {book.title}")
        if book.author:
            self._console.print(f"  Author: {book.author}")
        self._console.print(candidate_table(ranked))

        while True:
            choice = click.prompt(
                "[1-N] Apply  [v1-vN] View details  [s] Skip", type=str, default="s"
            ).strip().lower()

            if choice == "s":
                return None

            if choice.startswith("v"):
                idx = self._parse_index(choice[1:], len(ranked))
                if idx is not None:
                    picked = self._detail_prompt(book, ranked[idx].candidate)
                    if picked is not None:
                        return picked
                continue

            idx = self._parse_index(choice, len(ranked))
            if idx is not None:
                return ranked[idx].candidate

    @staticmethod
    def _parse_index(text: str, count: int) -> int | None:
        try:
            idx = int(text) - 1
        except ValueError:
            return None
        return idx if 0 <= idx < count else None

    def _show_detail(self, book: BookRecord, candidate: MetadataCandidate) -> None:
        """Render current catalog values next to the candidate's."""
        detail = Table(title="Detail Comparison")
        detail.add_column("Field", style="bold")
        detail.add_column("Current")
        detail.add_column("Candidate")

        description = candidate.description or ""
        if len(description) > _DESCRIPTION_PREVIEW:
            description = description[:_DESCRIPTION_PREVIEW].rstrip() + "..."

        rows = [
            ("Title", book.title, candidate.title),
            ("Author", book.author, candidate.author),
            ("Description", book.description, description),
            ("Cover", str(book.cover_path) if book.cover_path else None, candidate.cover_url),
            ("Also known as", None, ", ".join(candidate.title_alternatives)),
        ]
        for label, current, proposed in rows:
            detail.add_row(label, current or _EMPTY, proposed or _EMPTY)

        self._console.print(detail)

    def _detail_prompt(
        self, book: BookRecord, candidate: MetadataCandidate
    ) -> MetadataCandidate | None:
        """Show detail view; returns the candidate if accepted, None to go back."""
        self._show_detail(book, candidate)
        detail_choice = click.prompt("[a] Apply  [b] Back to list", type=str, default="b")
        if detail_choice.strip().lower() == "a":
            return candidate
        return None
