"""CLI commands for shareseed."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from shareseed.cli.formatting import render_summary
from shareseed.core.exceptions import ShareseedError


app = typer.Typer(
    name="shareseed",
    help="Populate file shares with realistic, owned, sparse files.",
    no_args_is_help=True,
)

LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def setup_logging(verbosity: int) -> None:
    """Route library logging through Rich on stderr.

    0 -> WARNING, 1 (-v) -> INFO, 2+ (-vv) -> DEBUG.
    """
    level = LOG_LEVELS.get(verbosity, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def fail(error: ShareseedError) -> typer.Exit:
    """Echo an error and its hint to stderr and return the exit to raise."""
    typer.echo(f"Error: {error}", err=True)
    if error.recovery_hint:
        typer.echo(f"Hint: {error.recovery_hint}", err=True)
    return typer.Exit(1)


def parse_group_map(pairs: list[str]) -> dict[str, str]:
    """Parse repeated "TAG=GROUP" options into a mapping.

    Raises:
        typer.BadParameter: If a pair has no "=".
    """
    mapping: dict[str, str] = {}
    for pair in pairs:
        tag, sep, group = pair.partition("=")
        if not sep or not tag.strip() or not group.strip():
            raise typer.BadParameter(f"Expected TAG=GROUP, got {pair!r}")
        mapping[tag.strip()] = group.strip()
    return mapping


@app.callback()
def callback(
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase log output (-v info, -vv debug).",
    ),
) -> None:
    """Populate file shares with realistic, owned, sparse files."""
    setup_logging(verbose)


@app.command()
def run(
    plan: Path = typer.Argument(..., help="Plan file (JSON Lines or JSON array)."),
    root: Path | None = typer.Option(
        None,
        "--root",
        "-r",
        help="Directory relative target paths are resolved against. Defaults to the plan's directory.",
    ),
    batch_size: int = typer.Option(
        100, "--batch-size", "-b", envvar="SHARESEED_BATCH_SIZE", help="Items per batch."
    ),
    max_workers: int | None = typer.Option(
        None,
        "--max-workers",
        "-w",
        envvar="SHARESEED_MAX_WORKERS",
        help="Concurrent workers. Defaults to a value derived from CPUs and plan size.",
    ),
    cache_ttl: int = typer.Option(
        300,
        "--cache-ttl",
        envvar="SHARESEED_CACHE_TTL",
        help="Seconds directory groups stay cached.",
    ),
    cap: int | None = typer.Option(
        None,
        "--cap",
        envvar="SHARESEED_CAP",
        help="Stop submitting new batches after this many items.",
    ),
    groups: Path | None = typer.Option(
        None,
        "--groups",
        "-g",
        envvar="SHARESEED_GROUPS",
        help="JSON file of directory groups and members.",
    ),
    group_map: list[str] = typer.Option(
        [],
        "--group-map",
        "-m",
        help="Map a tag to a group key (TAG=GROUP). Repeatable.",
    ),
    group_template: str = typer.Option(
        "{tag}", "--group-template", help="Group key for unmapped tags."
    ),
    fallback_owner: str = typer.Option(
        "Everyone", "--fallback-owner", help="Owner when no group member is available."
    ),
    qualify_domain: bool = typer.Option(
        False, "--qualify-domain", help="Prefix owners with DOMAIN\\ when known."
    ),
    apply_owner: bool = typer.Option(
        False, "--apply-owner", help="chown created files (needs privileges)."
    ),
    no_progress: bool = typer.Option(
        False, "--no-progress", help="Disable the live progress bar."
    ),
) -> None:
    """Create every file in a plan and print a summary."""
    from shareseed import (
        Engine,
        EngineConfig,
        IdentityPolicy,
        RichProgressReporter,
        StaticDirectoryProvider,
        load_plan,
    )
    from shareseed.core.formatting import summary_outcome

    config = EngineConfig(
        batch_size=batch_size,
        max_workers=max_workers,
        cache_ttl_seconds=cache_ttl,
        cap=cap,
    )
    try:
        policy = IdentityPolicy(
            group_for_tag=parse_group_map(group_map),
            group_template=group_template,
            fallback_owner=fallback_owner,
            qualify_with_domain=qualify_domain,
        )
        config.validate()
        items = load_plan(plan, root=root)
        provider = StaticDirectoryProvider.from_json(groups) if groups else None
        engine = Engine.from_config(
            config, provider, identity=policy, apply_ownership=apply_owner
        )
        if no_progress:
            summary = engine.run(items)
        else:
            with RichProgressReporter() as reporter:
                summary = engine.run(items, progress=reporter)
    except ShareseedError as e:
        raise fail(e) from None

    console = Console()
    console.print(render_summary(summary, summary_outcome(summary, len(items))))


def main() -> None:
    """Entry point for the CLI."""
    app()
