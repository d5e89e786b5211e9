"""Domain exceptions for shareseed.

All library errors inherit from ShareseedError, allowing users to catch
any library exception with a single except clause. Each exception provides
a recovery_hint property with guidance on resolving the error.

Only ConfigurationError escapes Engine.run() and TaskScheduler.execute();
item, batch and directory errors are recovered inside the workers and show
up as counts in the Summary.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from pathlib import Path


class ShareseedError(Exception):
    """Base class for all shareseed exceptions.

    Catch this to handle any error from the library.
    """

    @property
    def recovery_hint(self) -> str | None:
        """Optional guidance on how to resolve this error."""
        return None


class ConfigurationError(ShareseedError):
    """Raised for invalid engine configuration (e.g. batch_size <= 0).

    Attributes:
        field: Name of the offending configuration field, if known.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)

    @property
    def recovery_hint(self) -> str | None:
        """Point at the offending field."""
        if self.field:
            return f"Check the value of '{self.field}'"
        return None


class ItemError(ShareseedError):
    """Raised when a single work item could not be created.

    Attributes:
        path: Target path of the failed item.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        path: Path,
        cause: Exception | None = None,
    ) -> None:
        self.path = path
        self.cause = cause
        super().__init__(message)


class AllocationError(ItemError):
    """Raised when sparse allocation fails for an item."""

    @property
    def recovery_hint(self) -> str:
        """Suggest checking the backing filesystem."""
        return (
            f"Check free space and sparse-file support on the volume "
            f"holding {self.path.parent}"
        )


class BatchError(ShareseedError):
    """Unexpected failure while processing a whole batch.

    Never raised to callers: the worker pool records it and converts the
    batch into an all-errors result.

    Attributes:
        index: Index of the failed batch.
        size: Number of items in the batch.
        cause: The underlying exception.
    """

    def __init__(self, index: int, size: int, cause: BaseException) -> None:
        self.index = index
        self.size = size
        self.cause = cause
        super().__init__(f"Batch {index} ({size} items) failed: {cause!r}")


class DirectoryUnavailableError(ShareseedError):
    """Raised when the directory service cannot refresh group data.

    Attributes:
        keys: Group keys that could not be fetched.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        keys: list[str] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.keys = keys if keys is not None else []
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Explain the fallback behaviour."""
        return (
            "Items still get created with the fallback owner; "
            "check connectivity to the directory service"
        )


class SchedulerStateError(ShareseedError):
    """Raised when a TaskScheduler is used outside its state machine."""

    @property
    def recovery_hint(self) -> str:
        """Suggest creating a fresh scheduler."""
        return "Create a new TaskScheduler for each run"


class PlanLoadError(ShareseedError):
    """Raised when a plan file cannot be loaded.

    Attributes:
        plan_path: Path to the plan file that failed to load.
        line: Line number where the error occurred (if available).
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        plan_path: Path,
        line: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.plan_path = plan_path
        self.line = line
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest checking the plan file at the specific line."""
        if self.line:
            return f"Check {self.plan_path.name} at line {self.line}"
        return f"Check that {self.plan_path.name} is JSON Lines or a JSON array"
