"""Batch planning, cap-aware submission and result aggregation."""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Iterator, Sequence
from datetime import timedelta
from typing import TYPE_CHECKING

from shareseed.core.exceptions import ConfigurationError, SchedulerStateError
from shareseed.core.models import Batch, BatchResult, SchedulerState, Summary, WorkItem


if TYPE_CHECKING:
    from shareseed.core.aggregator import ProgressAggregator
    from shareseed.core.pool import ProcessBatch, WorkerPool


logger = logging.getLogger(__name__)


def split_batches(items: Sequence[WorkItem], batch_size: int) -> list[Batch]:
    """Split items into ceil(len(items) / batch_size) ordered batches.

    Example:
        >>> [len(b) for b in split_batches(items_237, 50)]
        [50, 50, 50, 50, 37]

    Raises:
        ConfigurationError: If batch_size < 1.
    """
    if batch_size < 1:
        raise ConfigurationError(
            f"batch_size must be positive, got {batch_size}", field="batch_size"
        )
    count = math.ceil(len(items) / batch_size)
    return [
        Batch(index=i, items=tuple(items[i * batch_size : (i + 1) * batch_size]))
        for i in range(count)
    ]


class TaskScheduler:
    """Feeds batches to a WorkerPool and produces the run Summary.

    A scheduler runs once: PLANNED -> SUBMITTING -> DRAINING -> DONE.
    The only cancellation is the cap, which stops submission of new batches
    while batches already handed to workers finish normally.
    """

    def __init__(
        self,
        pool: WorkerPool,
        aggregator: ProgressAggregator,
        process: ProcessBatch,
        max_workers: int = 1,
    ) -> None:
        self._pool = pool
        self._aggregator = aggregator
        self._process = process
        self._max_workers = max_workers
        self._state: SchedulerState | None = None
        self._state_lock = threading.Lock()
        self._summary: Summary | None = None

    @property
    def state(self) -> SchedulerState | None:
        """Current lifecycle state; None before execute() is called."""
        return self._state

    @property
    def summary(self) -> Summary:
        """Summary of the finished run.

        Raises:
            SchedulerStateError: If the run has not reached DONE.
        """
        if self._summary is None:
            raise SchedulerStateError("Summary is only available once the run is done")
        return self._summary

    def execute(
        self,
        items: Sequence[WorkItem],
        batch_size: int,
        cap: int | None = None,
    ) -> Summary:
        """Run every item (or up to the cap) through the worker pool.

        Args:
            items: Fully resolved work items.
            batch_size: Items per batch.
            cap: Stop submitting once this many items are processed or
                submitted. The last batch may overshoot by up to
                batch_size - 1 items.

        Returns:
            Summary of created and failed items.

        Raises:
            ConfigurationError: On invalid arguments, before any work starts.
            SchedulerStateError: If this scheduler already ran.
        """
        if cap is not None and cap < 0:
            raise ConfigurationError(f"cap cannot be negative, got {cap}", field="cap")
        if self._max_workers < 1:
            raise ConfigurationError(
                f"max_workers must be positive, got {self._max_workers}",
                field="max_workers",
            )
        batches = split_batches(items, batch_size)

        with self._state_lock:
            if self._state is not None:
                raise SchedulerStateError(
                    f"Scheduler already used (state: {self._state})"
                )
            self._state = SchedulerState.PLANNED
        logger.info("Planned %d items in %d batches", len(items), len(batches))

        start = time.monotonic()
        submitted: list[Batch] = []
        stopped_by_cap = False

        def feed() -> Iterator[Batch]:
            nonlocal stopped_by_cap
            submitted_items = 0
            for batch in batches:
                if cap is not None and self._cap_reached(cap, submitted_items):
                    stopped_by_cap = True
                    logger.info(
                        "Cap of %d reached; %d of %d batches submitted",
                        cap,
                        len(submitted),
                        len(batches),
                    )
                    break
                submitted.append(batch)
                submitted_items += len(batch)
                yield batch
            self._transition(SchedulerState.DRAINING)

        self._transition(SchedulerState.SUBMITTING)
        results = self._pool.run(
            feed(), self._max_workers, self._process, on_result=self._record
        )
        if self._state is SchedulerState.SUBMITTING:
            self._transition(SchedulerState.DRAINING)

        summary = self._summarize(results, len(batches), stopped_by_cap, start)
        self._summary = summary
        self._transition(SchedulerState.DONE)
        logger.info(
            "Run done: %d created, %d errors in %s",
            summary.total_created,
            summary.total_errors,
            summary.duration,
        )
        return summary

    def _cap_reached(self, cap: int, submitted_items: int) -> bool:
        return submitted_items >= cap or self._aggregator.snapshot().processed >= cap

    def _record(self, batch: Batch, result: BatchResult) -> None:
        self._aggregator.add(completed=result.created, errors=result.errors)
        logger.debug(
            "Batch %d finished: %d created, %d errors",
            batch.index,
            result.created,
            result.errors,
        )

    def _transition(self, state: SchedulerState) -> None:
        with self._state_lock:
            self._state = state

    @staticmethod
    def _summarize(
        results: list[BatchResult],
        batches_total: int,
        stopped_by_cap: bool,
        start: float,
    ) -> Summary:
        return Summary(
            total_created=sum(r.created for r in results),
            total_errors=sum(r.errors for r in results),
            duration=timedelta(seconds=time.monotonic() - start),
            batches_total=batches_total,
            batches_submitted=len(results),
            stopped_by_cap=stopped_by_cap,
        )
