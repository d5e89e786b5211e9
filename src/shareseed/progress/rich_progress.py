"""Rich-based progress reporter for terminal output."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)


if TYPE_CHECKING:
    from types import TracebackType

    from shareseed.core.models import ProgressState


class RichProgressReporter:
    """Progress reporter using Rich for terminal display.

    Shows one bar for the run with processed/total counts, the running
    error count, elapsed time and ETA.

    Example:
        with RichProgressReporter() as reporter:
            summary = engine.run(items, progress=reporter)
    """

    def __init__(self, description: str = "Seeding", console: Console | None = None) -> None:
        """Initialize the progress display."""
        self._description = description
        self._progress = Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TextColumn("[red]{task.fields[errors]} errors"),
            TimeElapsedColumn(),
            TimeRemainingColumn(),
            console=console,
        )
        self._task: TaskID | None = None
        self._started = False

    def __enter__(self) -> RichProgressReporter:
        """Start the progress display."""
        self._progress.start()
        self._started = True
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Stop the progress display."""
        self._progress.stop()
        self._started = False

    def start(self, total: int) -> None:
        """Add the run's task to the display.

        Args:
            total: Number of items the run will process.
        """
        # Auto-start if not in context manager
        if not self._started:
            self._progress.start()
            self._started = True
        self._task = self._progress.add_task(self._description, total=total, errors=0)

    def update(self, state: ProgressState) -> None:
        """Move the bar to the snapshot's processed count."""
        if self._task is None:
            return
        self._progress.update(self._task, completed=state.processed, errors=state.errors)

    def finish(self) -> None:
        """Refresh the final state of the bar."""
        if self._task is not None:
            self._progress.refresh()
