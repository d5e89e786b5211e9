"""Executor adapters implementing ExecutorPort."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Callable

    from shareseed.core.ports import ExecutorPort


WORKER_THREAD_PREFIX = "shareseed-worker"


class SynchronousExecutor:
    """Runs each submitted batch immediately in the calling thread.

    Used when a run has a single worker, and in tests that need
    deterministic ordering.
    """

    max_workers = 1

    def submit(
        self,
        fn: Callable[..., object],
        *args: object,
        **kwargs: object,
    ) -> Future[object]:
        """Run fn now and return an already-completed future.

        Exceptions raised by fn are stored on the future, not raised.
        """
        future: Future[object] = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def __enter__(self) -> SynchronousExecutor:
        return self

    def __exit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> object | None:
        return None


class ThreadPoolExecutorAdapter:
    """ThreadPoolExecutor behind ExecutorPort.

    Worker threads are named "shareseed-worker_N" so they are easy to spot
    in log records and thread dumps.
    """

    def __init__(self, max_workers: int) -> None:
        """Create a pool of at most max_workers threads."""
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=WORKER_THREAD_PREFIX
        )

    def submit(
        self,
        fn: Callable[..., object],
        *args: object,
        **kwargs: object,
    ) -> Future[object]:
        """Queue fn on the thread pool."""
        return self._executor.submit(fn, *args, **kwargs)

    def __enter__(self) -> ThreadPoolExecutorAdapter:
        self._executor.__enter__()
        return self

    def __exit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> object | None:
        """Shut the pool down, waiting for queued work."""
        return self._executor.__exit__(exc_type, exc_val, exc_tb)  # type: ignore[arg-type]


def create_executor(max_workers: int) -> ExecutorPort:
    """Default executor factory: synchronous for one worker, threads otherwise."""
    if max_workers <= 1:
        return SynchronousExecutor()
    return ThreadPoolExecutorAdapter(max_workers)
