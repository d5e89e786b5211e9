"""Shared formatting helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table
from rich.text import Text

from shareseed.core.formatting import (
    format_duration,
    format_rate,
    outcome_to_color,
)


if TYPE_CHECKING:
    from shareseed.core.directory_cache import DirectoryCache
    from shareseed.core.models import Batch, Summary


def _format_outcome_with_color(outcome: str) -> Text:
    """Format an outcome string with color coding.

    Args:
        outcome: "complete", "partial" or "capped".

    Returns:
        Rich Text object with appropriate color:
        - "complete" -> green
        - "partial" -> yellow
        - "capped" -> cyan
    """
    color = outcome_to_color(outcome)
    return Text(outcome, style=color) if color else Text(outcome)


def render_summary(summary: Summary, outcome: str) -> Table:
    """Two-column table describing a finished run."""
    table = Table(title="Run summary", show_header=False)
    table.add_column("Field")
    table.add_column("Value")

    table.add_row("Outcome", _format_outcome_with_color(outcome))
    table.add_row("Created", str(summary.total_created))
    table.add_row("Errors", str(summary.total_errors))
    table.add_row("Batches", f"{summary.batches_submitted}/{summary.batches_total}")
    table.add_row("Duration", format_duration(summary.duration))
    table.add_row("Rate", format_rate(summary.processed, summary.duration))
    return table


def render_batches(batches: list[Batch], limit: int | None = None) -> Table:
    """Table of planned batches: size, directory count and first target."""
    table = Table(title=f"{len(batches)} batches")
    table.add_column("Batch", justify="right")
    table.add_column("Items", justify="right")
    table.add_column("Dirs", justify="right")
    table.add_column("First target")

    shown = batches if limit is None else batches[:limit]
    for batch in shown:
        dirs = {item.target_path.parent for item in batch.items}
        first = str(batch.items[0].target_path) if batch.items else ""
        table.add_row(str(batch.index), str(len(batch)), str(len(dirs)), first)
    if limit is not None and len(batches) > limit:
        table.caption = f"{len(batches) - limit} more not shown"
    return table


def render_groups(cache: DirectoryCache) -> Table:
    """Table of cached directory groups and their member counts."""
    domain = cache.current_domain
    table = Table(title=f"Directory groups ({domain})" if domain else "Directory groups")
    table.add_column("Group")
    table.add_column("Members", justify="right")

    for key in cache.keys():
        entry = cache.lookup(key)
        table.add_row(key, str(len(entry.members)) if entry else "expired")
    return table
