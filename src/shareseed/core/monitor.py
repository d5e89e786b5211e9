"""Reporting loop that polls a ProgressAggregator at a fixed interval."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from shareseed.config import DEFAULT_REPORT_INTERVAL


if TYPE_CHECKING:
    from types import TracebackType

    from shareseed.core.aggregator import ProgressAggregator
    from shareseed.core.ports import ProgressReporter


logger = logging.getLogger(__name__)


class ProgressMonitor:
    """Pushes aggregator snapshots to a reporter from a background thread.

    Snapshots are taken at most once per interval no matter how fast
    workers finish, which keeps reporting off the workers' lock path.

    Example:
        with ProgressMonitor(aggregator, reporter, total=len(items)):
            scheduler.execute(items, batch_size=100)
    """

    def __init__(
        self,
        aggregator: ProgressAggregator,
        reporter: ProgressReporter,
        total: int,
        interval: float = DEFAULT_REPORT_INTERVAL,
    ) -> None:
        self._aggregator = aggregator
        self._reporter = reporter
        self._total = total
        self._interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def __enter__(self) -> ProgressMonitor:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.stop()

    def start(self) -> None:
        """Start the reporter and the polling thread."""
        self._reporter.start(self._total)
        self._thread = threading.Thread(
            target=self._loop, name="shareseed-progress", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop polling, push one final snapshot and finish the reporter."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        self._reporter.update(self._aggregator.snapshot())
        self._reporter.finish()

    def _loop(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self._reporter.update(self._aggregator.snapshot())
            except Exception:
                logger.exception("Progress reporter failed; disabling updates")
                return
