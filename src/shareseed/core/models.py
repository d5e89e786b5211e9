"""Core domain models for shareseed.

These models are pure Python dataclasses with no I/O dependencies.
They are the values passed between the scheduler, the worker pool and
the per-batch pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum
from pathlib import Path
from typing import Self


class ItemKind(StrEnum):
    """What a work item represents on the share."""

    FILE = "file"
    CLUTTER = "clutter"


@dataclass(frozen=True, slots=True)
class WorkItem:
    """A single planned file.

    Attributes:
        target_path: Where the file should be created.
        size_kb: Logical size of the file in kilobytes.
        tag: Metadata tag used for ownership, typically a department.
        kind: Regular file or clutter (temp files, thumbnails, lock files).

    Example:
        >>> item = WorkItem(Path("share/Finance/q3.xlsx"), size_kb=120, tag="Finance")
        >>> item.content_type
        'xlsx'
    """

    target_path: Path
    size_kb: int
    tag: str = ""
    kind: ItemKind = ItemKind.FILE

    def __post_init__(self) -> None:
        """Validate work item fields after initialization."""
        if not isinstance(self.target_path, Path):
            object.__setattr__(self, "target_path", Path(self.target_path))
        if not str(self.target_path) or str(self.target_path) == ".":
            raise ValueError("WorkItem target_path cannot be empty")
        if self.size_kb < 0:
            raise ValueError(f"WorkItem size_kb must be >= 0, got {self.size_kb}")

    @property
    def size_bytes(self) -> int:
        """Logical size in bytes."""
        return self.size_kb * 1024

    @property
    def content_type(self) -> str:
        """Key used to pick a content stub.

        Lower-case extension without the dot for regular files,
        "clutter" for clutter items.
        """
        if self.kind is ItemKind.CLUTTER:
            return ItemKind.CLUTTER.value
        return self.target_path.suffix.lower().lstrip(".")

    def with_resolved_path(self, root: Path) -> Self:
        """Return a new WorkItem with target_path resolved against root.

        Absolute paths are unchanged.
        """
        if self.target_path.is_absolute():
            return self
        return type(self)(
            target_path=root / self.target_path,
            size_kb=self.size_kb,
            tag=self.tag,
            kind=self.kind,
        )


@dataclass(frozen=True, slots=True)
class Batch:
    """An ordered slice of work items handed to one worker."""

    index: int
    items: tuple[WorkItem, ...]

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True)
class BatchResult:
    """Outcome counts for one processed batch.

    For every completed batch, created + errors == len(batch).
    """

    created: int
    errors: int

    @classmethod
    def failed(cls, batch: Batch) -> Self:
        """Result for a batch whose processing blew up entirely."""
        return cls(created=0, errors=len(batch))

    def matches(self, batch: Batch) -> bool:
        """Check the result accounts for every item in batch."""
        return (
            self.created >= 0
            and self.errors >= 0
            and self.created + self.errors == len(batch)
        )


@dataclass(frozen=True, slots=True)
class ItemOutcome:
    """What happened to a single work item.

    Attributes:
        item: The work item.
        final_path: Path actually created (differs from target_path after
            a collision rename). None on failure.
        error: Error message on failure, None on success.
    """

    item: WorkItem
    final_path: Path | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """True when the file was created."""
        return self.error is None and self.final_path is not None


@dataclass(frozen=True, slots=True)
class DirectoryCacheEntry:
    """Cached members of one directory group."""

    key: str
    members: tuple[str, ...]
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Check whether the entry is stale at now."""
        return self.expires_at <= now


@dataclass(frozen=True, slots=True)
class ProgressState:
    """Point-in-time read of the run's progress counters."""

    completed: int
    errors: int
    started_at: datetime

    @property
    def processed(self) -> int:
        """Items accounted for so far, successful or not."""
        return self.completed + self.errors


class SchedulerState(StrEnum):
    """Lifecycle of a TaskScheduler run."""

    PLANNED = "planned"
    SUBMITTING = "submitting"
    DRAINING = "draining"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class Summary:
    """Final result of a run.

    Attributes:
        total_created: Items created successfully.
        total_errors: Items that failed.
        duration: Wall time of the run.
        batches_total: Batches planned.
        batches_submitted: Batches handed to the worker pool.
        stopped_by_cap: True when the cap stopped submission early.
    """

    total_created: int
    total_errors: int
    duration: timedelta
    batches_total: int = 0
    batches_submitted: int = 0
    stopped_by_cap: bool = False

    @property
    def processed(self) -> int:
        """Items accounted for in this summary."""
        return self.total_created + self.total_errors
