"""Formatting utilities for domain values."""

from datetime import timedelta

from shareseed.core.models import Summary


def format_duration(duration: timedelta | None) -> str:
    """Render a duration as H:MM:SS, or "--:--" when unknown.

    Example:
        >>> format_duration(timedelta(seconds=3725))
        '1:02:05'
    """
    if duration is None:
        return "--:--"
    total = int(duration.total_seconds())
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}"


def format_rate(items: int, duration: timedelta) -> str:
    """Render a throughput like "1,234.5 items/s"."""
    seconds = duration.total_seconds()
    if seconds <= 0:
        return "n/a"
    return f"{items / seconds:,.1f} items/s"


def summary_outcome(summary: Summary, planned: int) -> str:
    """Classify a run as "complete", "partial" or "capped".

    - "capped": the cap stopped submission before every item ran
    - "partial": every item ran but some failed
    - "complete": every item ran and none failed
    """
    if summary.stopped_by_cap and summary.processed < planned:
        return "capped"
    if summary.total_errors:
        return "partial"
    return "complete"


def outcome_to_color(outcome: str) -> str:
    """Map an outcome string to a color name, empty for unknown outcomes."""
    color_map = {
        "complete": "green",
        "partial": "yellow",
        "capped": "cyan",
    }
    return color_map.get(outcome, "")
