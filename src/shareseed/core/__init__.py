"""Core domain module for shareseed.

This module contains the domain models, port definitions and the
concurrency core (cache, builder, aggregator, pool, scheduler). Adapters
are injected; nothing here talks to a directory service directly.
"""

from shareseed.core.models import (
    Batch,
    BatchResult,
    DirectoryCacheEntry,
    ItemKind,
    ProgressState,
    SchedulerState,
    Summary,
    WorkItem,
)
from shareseed.core.ports import (
    ContentStubProvider,
    DirectoryProvider,
    ExecutorPort,
    FileSystemPort,
    ProgressReporter,
)


__all__ = [
    "Batch",
    "BatchResult",
    "ContentStubProvider",
    "DirectoryCacheEntry",
    "DirectoryProvider",
    "ExecutorPort",
    "FileSystemPort",
    "ItemKind",
    "ProgressReporter",
    "ProgressState",
    "SchedulerState",
    "Summary",
    "WorkItem",
]
