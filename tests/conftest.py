"""Pytest configuration and shared fixtures.

This module registers custom markers for CI job separation and provides
shared fakes for the directory service, the clock and the filesystem.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from shareseed.adapters.filesystem import LocalFileSystem
from shareseed.core.exceptions import AllocationError
from shareseed.core.models import ItemKind, WorkItem


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "core: Core models, ports, and config")
    config.addinivalue_line("markers", "cache: Directory cache")
    config.addinivalue_line("markers", "builder: Bulk file builder and filesystem")
    config.addinivalue_line("markers", "pool: Worker pool and executors")
    config.addinivalue_line("markers", "scheduler: Task scheduler")
    config.addinivalue_line("markers", "progress: Progress aggregation and display")
    config.addinivalue_line("markers", "cli: CLI tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")
    config.addinivalue_line("markers", "property: Property-based tests (hypothesis)")
    config.addinivalue_line(
        "markers", "tra: Test Responsibility Anchor (TRA) - namespace.Anchor format"
    )
    config.addinivalue_line(
        "markers",
        "tier: Test tier for CI job separation (0=instant, 1=fast, 2=standard, 3=slow, 4=manual)",
    )


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeDirectoryProvider:
    """DirectoryProvider that counts calls and can fail or stall on demand."""

    def __init__(
        self,
        groups: dict[str, list[str]] | None = None,
        domain: str | None = "CORP",
        fail: bool = False,
        delay: float = 0.0,
    ) -> None:
        self.groups = groups if groups is not None else {}
        self.domain = domain
        self.fail = fail
        self.delay = delay
        self.fetch_calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def fetch_group(self, key: str) -> list[str]:
        with self._lock:
            self.fetch_calls += 1
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            if self.fail:
                raise ConnectionError("directory service unreachable")
            return list(self.groups[key])
        finally:
            with self._lock:
                self.in_flight -= 1

    def list_groups(self) -> list[str]:
        if self.fail:
            raise ConnectionError("directory service unreachable")
        return sorted(self.groups)

    def current_domain(self) -> str | None:
        return self.domain


class FlakyFileSystem(LocalFileSystem):
    """LocalFileSystem that fails allocation for names containing a marker."""

    def __init__(self, marker: str = "FAIL") -> None:
        super().__init__()
        self.marker = marker
        self.ensured: list[Path] = []
        self.owners: dict[Path, str] = {}

    def ensure_dir(self, path: Path) -> None:
        self.ensured.append(path)
        super().ensure_dir(path)

    def allocate_sparse(self, path: Path, nbytes: int, stub: bytes = b"") -> None:
        if self.marker in path.name:
            raise AllocationError("sparse files not supported", path=path)
        super().allocate_sparse(path, nbytes, stub)

    def set_owner(self, path: Path, owner: str) -> None:
        self.owners[path] = owner


@pytest.fixture
def fake_clock() -> FakeClock:
    """A clock frozen at 2024-01-01 UTC that tests advance explicitly."""
    return FakeClock()


@pytest.fixture
def fake_provider() -> FakeDirectoryProvider:
    """Directory provider with two departments and a domain."""
    return FakeDirectoryProvider(
        groups={
            "Finance": ["alice", "bob"],
            "HR": ["carol"],
            "Empty": [],
        }
    )


@pytest.fixture
def provider_factory() -> type[FakeDirectoryProvider]:
    """The fake provider class, for tests that need custom groups or failures."""
    return FakeDirectoryProvider


@pytest.fixture
def flaky_fs() -> FlakyFileSystem:
    """Filesystem that fails items whose name contains FAIL."""
    return FlakyFileSystem()


@pytest.fixture
def make_items(tmp_path: Path) -> Callable[..., list[WorkItem]]:
    """Factory for n work items spread over a few department folders."""

    def _make(
        n: int,
        *,
        tags: tuple[str, ...] = ("Finance", "HR"),
        size_kb: int = 4,
        root: Path | None = None,
    ) -> list[WorkItem]:
        base = root or tmp_path / "share"
        return [
            WorkItem(
                target_path=base / tags[i % len(tags)] / f"doc_{i:05d}.txt",
                size_kb=size_kb,
                tag=tags[i % len(tags)],
                kind=ItemKind.FILE,
            )
            for i in range(n)
        ]

    return _make
