"""Port interfaces for hexagonal architecture.

Ports define contracts that adapters must implement. The core domain
depends only on these protocols, never on concrete implementations.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from concurrent.futures import Future
    from pathlib import Path

    from shareseed.core.models import ProgressState


@runtime_checkable
class DirectoryProvider(Protocol):
    """External identity service exposing group lookups.

    Every call may block on a network round trip. Implementations raise
    on failure; the DirectoryCache turns that into DirectoryUnavailableError.
    """

    def fetch_group(self, key: str) -> list[str]:
        """Return the member identities of a group."""
        ...

    def list_groups(self) -> list[str]:
        """Return the keys of every group worth caching.

        Used by DirectoryCache.warm() when no keys were configured.
        """
        ...

    def current_domain(self) -> str | None:
        """Return the domain the provider is bound to, if it has one."""
        ...


@runtime_checkable
class ContentStubProvider(Protocol):
    """Supplies placeholder bytes written at the start of each file."""

    def stub_for(self, kind: str) -> bytes:
        """Return stub bytes for a content type (e.g. "pdf", "clutter").

        Unknown kinds return b"".
        """
        ...


@runtime_checkable
class FileSystemPort(Protocol):
    """Storage primitives the engine orchestrates."""

    def ensure_dir(self, path: Path) -> None:
        """Create a directory and its parents; no-op if it exists."""
        ...

    def allocate_sparse(self, path: Path, nbytes: int, stub: bytes = b"") -> None:
        """Exclusively create path as a sparse file of nbytes.

        The stub is written at offset 0; the rest of the file is a hole.

        Raises:
            FileExistsError: If path already exists. Callers rename and retry.
            AllocationError: If the file cannot be created or extended.
        """
        ...

    def set_owner(self, path: Path, owner: str) -> None:
        """Assign an owner identity to path."""
        ...


@runtime_checkable
class ProgressReporter(Protocol):
    """Displays run progress to the user.

    The core domain pushes ProgressState snapshots through this protocol
    without depending on any specific UI library.
    """

    def start(self, total: int) -> None:
        """Begin reporting a run of total items."""
        ...

    def update(self, state: ProgressState) -> None:
        """Show the latest snapshot."""
        ...

    def finish(self) -> None:
        """Stop reporting."""
        ...


class NullProgressReporter:
    """A ProgressReporter that produces no output.

    Used as the default when no progress reporting is desired.
    """

    def start(self, total: int) -> None:
        """Do nothing."""
        _ = total  # Unused but required by protocol

    def update(self, state: ProgressState) -> None:
        """Do nothing."""
        _ = state

    def finish(self) -> None:
        """Do nothing."""


@runtime_checkable
class ExecutorPort(Protocol):
    """Executor for parallel batch execution.

    Abstracts over concurrent.futures executors so the worker pool can be
    tested with a synchronous executor, keeping concurrency at the edges.
    """

    def submit(
        self, fn: Callable[..., object], *args: object, **kwargs: object
    ) -> Future[object]:  # type: ignore[name-defined, unused-ignore]
        """Submit a function for execution.

        Args:
            fn: Function to execute.
            *args: Positional arguments to pass to fn.
            **kwargs: Keyword arguments to pass to fn.

        Returns:
            Future representing the pending result.
        """
        ...

    def __enter__(self) -> ExecutorPort:
        """Enter context manager."""
        ...

    def __exit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> object | None:
        """Exit context manager, waiting for submitted work."""
        ...


ExecutorFactory = Callable[[int], ExecutorPort]
