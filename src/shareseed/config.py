"""Configuration for shareseed runs.

Every field has a safe default; EngineConfig() is a valid configuration.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass

from shareseed.core.exceptions import ConfigurationError


DEFAULT_BATCH_SIZE = 100
DEFAULT_CACHE_TTL_SECONDS = 300
DEFAULT_REPORT_INTERVAL = 0.5

# Below this many items a single worker finishes before a pool warms up.
SMALL_RUN_ITEMS = 200
MAX_DEFAULT_WORKERS = 32


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Tunables for one engine run.

    Attributes:
        batch_size: Items per batch handed to a worker.
        max_workers: Concurrent workers. None derives it from the CPU count
            and the size of the work list (see default_max_workers).
        cache_ttl_seconds: Lifetime of cached directory groups.
        cap: Stop submitting new batches once this many items are
            processed. None runs every item.
        report_interval: Seconds between progress reporter refreshes.
    """

    batch_size: int = DEFAULT_BATCH_SIZE
    max_workers: int | None = None
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    cap: int | None = None
    report_interval: float = DEFAULT_REPORT_INTERVAL

    def validate(self) -> None:
        """Check every field, raising on the first invalid one.

        Raises:
            ConfigurationError: If any field is out of range.
        """
        if self.batch_size <= 0:
            raise ConfigurationError(
                f"batch_size must be positive, got {self.batch_size}",
                field="batch_size",
            )
        if self.max_workers is not None and self.max_workers <= 0:
            raise ConfigurationError(
                f"max_workers must be positive, got {self.max_workers}",
                field="max_workers",
            )
        if self.cache_ttl_seconds < 0:
            raise ConfigurationError(
                f"cache_ttl_seconds cannot be negative, got {self.cache_ttl_seconds}",
                field="cache_ttl_seconds",
            )
        if self.cap is not None and self.cap < 0:
            raise ConfigurationError(
                f"cap cannot be negative, got {self.cap}", field="cap"
            )
        if self.report_interval <= 0:
            raise ConfigurationError(
                f"report_interval must be positive, got {self.report_interval}",
                field="report_interval",
            )

    def workers_for(self, item_count: int) -> int:
        """Resolve max_workers for a work list of item_count items."""
        if self.max_workers is not None:
            return self.max_workers
        return default_max_workers(item_count, self.batch_size)


def default_max_workers(
    item_count: int, batch_size: int, cpu_count: int | None = None
) -> int:
    """Pick a worker count from CPU parallelism and the size of the work list.

    Work is I/O bound, so up to two workers per CPU are used, but never more
    workers than batches, and a single worker for small runs.

    Args:
        item_count: Number of work items in the run.
        batch_size: Items per batch.
        cpu_count: CPU count override. None uses os.cpu_count().

    Returns:
        Worker count, always >= 1.

    Example:
        >>> default_max_workers(237, 50, cpu_count=2)
        4
    """
    if item_count < SMALL_RUN_ITEMS:
        return 1
    cpus = cpu_count if cpu_count is not None else (os.cpu_count() or 1)
    batches = math.ceil(item_count / max(batch_size, 1))
    return max(1, min(cpus * 2, batches, MAX_DEFAULT_WORKERS))
