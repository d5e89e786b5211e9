"""Bounded worker pool that isolates per-batch failures."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from shareseed.core.exceptions import BatchError, ConfigurationError
from shareseed.core.models import Batch, BatchResult


if TYPE_CHECKING:
    from concurrent.futures import Future

    from shareseed.core.ports import ExecutorFactory


logger = logging.getLogger(__name__)

ProcessBatch = Callable[[Batch], BatchResult]
OnResult = Callable[[Batch, BatchResult], None]


class WorkerPool:
    """Runs a process callable over batches with at most max_workers in flight.

    The next batch is pulled from the iterable only once a worker slot is
    free, so a lazy iterable (like the scheduler's cap-aware generator) sees
    up-to-date progress before deciding whether to yield more work.
    """

    def __init__(self, executor_factory: ExecutorFactory | None = None) -> None:
        """Initialize the pool.

        Args:
            executor_factory: Builds an ExecutorPort for a worker count.
                Defaults to a synchronous executor for one worker and a
                thread pool otherwise.
        """
        if executor_factory is None:
            from shareseed.adapters.executor import create_executor

            executor_factory = create_executor
        self._executor_factory = executor_factory

    def run(
        self,
        batches: Iterable[Batch],
        max_workers: int,
        process: ProcessBatch,
        on_result: OnResult | None = None,
    ) -> list[BatchResult]:
        """Process every batch the iterable yields.

        Args:
            batches: Batches to run; consumed lazily, one per free worker.
            max_workers: Upper bound on concurrent process() calls.
            process: Per-batch pipeline. Exceptions are contained.
            on_result: Called from the worker with each batch's result.

        Returns:
            One result per submitted batch, in submission order. Returns only
            after every submitted batch has finished.

        Raises:
            ConfigurationError: If max_workers < 1.
        """
        if max_workers < 1:
            raise ConfigurationError(
                f"max_workers must be positive, got {max_workers}",
                field="max_workers",
            )

        slots = threading.BoundedSemaphore(max_workers)
        futures: list[Future[object]] = []
        iterator = iter(batches)

        with self._executor_factory(max_workers) as executor:
            while True:
                slots.acquire()
                batch = next(iterator, None)
                if batch is None:
                    slots.release()
                    break
                future = executor.submit(self._run_one, batch, process, on_result)
                future.add_done_callback(lambda _f: slots.release())
                futures.append(future)

        results: list[BatchResult] = []
        for future in futures:
            result = future.result()
            assert isinstance(result, BatchResult)
            results.append(result)
        return results

    @staticmethod
    def _run_one(
        batch: Batch, process: ProcessBatch, on_result: OnResult | None
    ) -> BatchResult:
        try:
            result = process(batch)
        except Exception as e:
            logger.exception("%s", BatchError(batch.index, len(batch), e))
            result = BatchResult.failed(batch)
        else:
            if not isinstance(result, BatchResult) or not result.matches(batch):
                logger.error(
                    "Batch %d returned %r for %d items; counting all as errors",
                    batch.index,
                    result,
                    len(batch),
                )
                result = BatchResult.failed(batch)

        if on_result is not None:
            on_result(batch, result)
        return result
