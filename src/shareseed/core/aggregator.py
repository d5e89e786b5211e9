"""Thread-safe progress counters shared by every worker in a run."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from shareseed.core.models import ProgressState


class ProgressAggregator:
    """Completed/error counters with rate and ETA derivation.

    Updated once per finished batch from worker threads and polled by a
    reporting loop. All reads and writes go through one lock, so a snapshot
    never sees a half-applied update and counters only ever grow.

    The aggregator does not throttle readers; polling cadence is up to the
    caller (see ProgressMonitor).
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        started_at: datetime | None = None,
    ) -> None:
        """Initialize counters at zero.

        Args:
            clock: Monotonic clock in seconds, used for rate and ETA.
            started_at: Wall-clock start reported in snapshots.
        """
        self._lock = threading.Lock()
        self._clock = clock
        self._start = clock()
        self._started_at = started_at or datetime.now(UTC)
        self._completed = 0
        self._errors = 0

    def add(self, completed: int = 0, errors: int = 0) -> None:
        """Add finished item counts.

        Raises:
            ValueError: If either count is negative.
        """
        if completed < 0 or errors < 0:
            raise ValueError("progress counts cannot be negative")
        with self._lock:
            self._completed += completed
            self._errors += errors

    def snapshot(self) -> ProgressState:
        """Return a consistent point-in-time read of the counters."""
        with self._lock:
            return ProgressState(
                completed=self._completed,
                errors=self._errors,
                started_at=self._started_at,
            )

    def elapsed(self) -> timedelta:
        """Wall time since the aggregator was created."""
        return timedelta(seconds=max(self._clock() - self._start, 0.0))

    def rate(self) -> float:
        """Processed items (created or failed) per second."""
        seconds = self.elapsed().total_seconds()
        if seconds <= 0:
            return 0.0
        return self.snapshot().processed / seconds

    def eta(self, total: int) -> timedelta | None:
        """Estimated time until total items are processed.

        Returns:
            Remaining time, timedelta(0) once total is reached, or None
            while no item has been processed yet.
        """
        processed = self.snapshot().processed
        remaining = total - processed
        if remaining <= 0:
            return timedelta(0)
        rate = self.rate()
        if rate <= 0:
            return None
        return timedelta(seconds=remaining / rate)
