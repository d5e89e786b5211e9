"""Unit tests for RichProgressReporter adapter."""

from datetime import UTC, datetime
from io import StringIO

import pytest
from rich.console import Console

from shareseed.core.models import ProgressState


def quiet_console() -> Console:
    return Console(file=StringIO(), force_terminal=False, width=100)


@pytest.mark.progress
@pytest.mark.tier(1)
class TestRichProgressReporter:
    """Tests for RichProgressReporter."""

    def test_rich_reporter_satisfies_protocol(self) -> None:
        """RichProgressReporter should implement ProgressReporter."""
        from shareseed.core.ports import ProgressReporter
        from shareseed.progress import RichProgressReporter

        assert isinstance(RichProgressReporter(), ProgressReporter)

    def test_update_before_start_is_ignored(self) -> None:
        """update() without a task does nothing."""
        from shareseed.progress import RichProgressReporter

        reporter = RichProgressReporter(console=quiet_console())
        reporter.update(ProgressState(1, 0, datetime.now(UTC)))
        reporter.finish()

    def test_full_lifecycle_in_context_manager(self) -> None:
        """start/update/finish render the processed and error counts."""
        from shareseed.progress import RichProgressReporter

        with RichProgressReporter("Seeding", console=quiet_console()) as reporter:
            reporter.start(10)
            reporter.update(ProgressState(7, 3, datetime.now(UTC)))
            reporter.finish()
            task = reporter._progress.tasks[0]

        assert task.description == "Seeding"
        assert task.total == 10
        assert task.completed == 10
        assert task.fields["errors"] == 3

    def test_start_outside_context_manager(self) -> None:
        """start() begins the live display on its own."""
        from shareseed.progress import RichProgressReporter

        reporter = RichProgressReporter(console=quiet_console())
        reporter.start(5)
        try:
            reporter.update(ProgressState(5, 0, datetime.now(UTC)))
            reporter.finish()
        finally:
            reporter.__exit__(None, None, None)
