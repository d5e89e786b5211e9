"""Batches command for CLI."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from shareseed.cli.formatting import render_batches
from shareseed.cli.main import app, fail
from shareseed.core.exceptions import ShareseedError


@app.command()
def batches(
    plan: Path = typer.Argument(..., help="Plan file (JSON Lines or JSON array)."),
    batch_size: int = typer.Option(
        100, "--batch-size", "-b", envvar="SHARESEED_BATCH_SIZE", help="Items per batch."
    ),
    limit: int = typer.Option(20, "--limit", "-n", help="Rows to show."),
) -> None:
    """Show how a plan splits into batches without creating anything."""
    from shareseed.core.scheduler import split_batches
    from shareseed.plan import load_plan

    try:
        items = load_plan(plan)
        planned = split_batches(items, batch_size)
    except ShareseedError as e:
        raise fail(e) from None

    if not planned:
        typer.echo("Plan is empty.")
        return

    console = Console()
    console.print(render_batches(planned, limit=limit))
