"""Groups command for CLI."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from shareseed.cli.formatting import render_groups
from shareseed.cli.main import app, fail
from shareseed.core.exceptions import ShareseedError


@app.command()
def groups(
    groups_file: Path = typer.Argument(..., help="JSON file of directory groups."),
) -> None:
    """Load a groups file into the directory cache and list what got cached."""
    from shareseed.adapters.directory import StaticDirectoryProvider
    from shareseed.core.directory_cache import DirectoryCache

    try:
        provider = StaticDirectoryProvider.from_json(groups_file)
        cache = DirectoryCache(provider)
        cache.warm(force=True)
    except ShareseedError as e:
        raise fail(e) from None

    if not cache.keys():
        typer.echo("No groups found.")
        return

    console = Console()
    console.print(render_groups(cache))
