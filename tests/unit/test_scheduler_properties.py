"""Property-based tests for batching, per-batch accounting and progress."""

from __future__ import annotations

import math
from pathlib import Path

import pytest

from shareseed.core.aggregator import ProgressAggregator
from shareseed.core.models import Batch, BatchResult, WorkItem
from shareseed.core.pool import WorkerPool
from shareseed.core.scheduler import TaskScheduler, split_batches


def items(n: int) -> list[WorkItem]:
    return [WorkItem(Path(f"share/f{i:05d}.txt"), size_kb=1) for i in range(n)]


@pytest.mark.scheduler
@pytest.mark.property
@pytest.mark.tra("Scheduler.Split")
@pytest.mark.tier(1)
def test_split_batches_property() -> None:
    """Property: ceil(n / size) batches that partition the items in order."""
    from hypothesis import given, settings
    from hypothesis.strategies import integers

    @settings(database=None)
    @given(n=integers(min_value=0, max_value=500), size=integers(min_value=1, max_value=120))
    def check(n: int, size: int) -> None:
        work = items(n)
        batches = split_batches(work, size)

        assert len(batches) == math.ceil(n / size)
        assert [b.index for b in batches] == list(range(len(batches)))
        assert all(len(b) == size for b in batches[:-1])
        assert all(1 <= len(b) <= size for b in batches)
        assert [i for b in batches for i in b.items] == work

    check()


@pytest.mark.pool
@pytest.mark.property
@pytest.mark.tra("Pool.Run")
@pytest.mark.tier(1)
def test_every_batch_result_accounts_for_its_items_property() -> None:
    """Property: created + errors == len(batch), whatever process() does."""
    from hypothesis import given, settings
    from hypothesis.strategies import integers, lists, sampled_from

    @settings(database=None, max_examples=50)
    @given(
        n=integers(min_value=0, max_value=120),
        size=integers(min_value=1, max_value=25),
        workers=integers(min_value=1, max_value=4),
        behaviours=lists(sampled_from(["ok", "partial", "raise", "bogus"]), min_size=1),
    )
    def check(n: int, size: int, workers: int, behaviours: list[str]) -> None:
        def process(batch: Batch) -> BatchResult:
            behaviour = behaviours[batch.index % len(behaviours)]
            if behaviour == "raise":
                raise OSError("share offline")
            if behaviour == "bogus":
                return BatchResult(created=len(batch) + 1, errors=0)
            if behaviour == "partial":
                return BatchResult(created=len(batch) // 2, errors=len(batch) - len(batch) // 2)
            return BatchResult(created=len(batch), errors=0)

        seen: dict[int, BatchResult] = {}
        batches = split_batches(items(n), size)
        results = WorkerPool().run(
            batches, workers, process, on_result=lambda b, r: seen.__setitem__(b.index, r)
        )

        assert len(results) == len(batches)
        for batch, result in zip(batches, results, strict=True):
            assert result.created + result.errors == len(batch)
            assert seen[batch.index] == result

    check()


@pytest.mark.scheduler
@pytest.mark.property
@pytest.mark.tra("Scheduler.Execute")
@pytest.mark.tier(1)
def test_execute_totals_property() -> None:
    """Property: the summary and the aggregator agree on every item."""
    from hypothesis import given, settings
    from hypothesis.strategies import integers, sets

    @settings(database=None, max_examples=50)
    @given(
        n=integers(min_value=0, max_value=200),
        size=integers(min_value=1, max_value=40),
        workers=integers(min_value=1, max_value=4),
        failing=sets(integers(min_value=0, max_value=20)),
    )
    def check(n: int, size: int, workers: int, failing: set[int]) -> None:
        def process(batch: Batch) -> BatchResult:
            if batch.index in failing:
                raise OSError("volume offline")
            return BatchResult(created=len(batch), errors=0)

        aggregator = ProgressAggregator()
        summary = TaskScheduler(
            WorkerPool(), aggregator, process, max_workers=workers
        ).execute(items(n), batch_size=size)

        batch_count = math.ceil(n / size)
        expected_errors = sum(
            min(size, n - i * size) for i in range(batch_count) if i in failing
        )
        assert summary.batches_total == summary.batches_submitted == batch_count
        assert summary.processed == n
        assert summary.total_errors == expected_errors
        assert aggregator.snapshot().completed == summary.total_created
        assert aggregator.snapshot().errors == summary.total_errors

    check()


@pytest.mark.scheduler
@pytest.mark.property
@pytest.mark.tra("Scheduler.Cap")
@pytest.mark.tier(1)
def test_cap_bounds_processed_property() -> None:
    """Property: a cap stops at or past itself, by less than one batch."""
    from hypothesis import given, settings
    from hypothesis.strategies import integers

    @settings(database=None, max_examples=50)
    @given(
        n=integers(min_value=0, max_value=200),
        size=integers(min_value=1, max_value=40),
        cap=integers(min_value=0, max_value=250),
    )
    def check(n: int, size: int, cap: int) -> None:
        summary = TaskScheduler(
            WorkerPool(),
            ProgressAggregator(),
            lambda b: BatchResult(created=len(b), errors=0),
            max_workers=1,
        ).execute(items(n), batch_size=size, cap=cap)

        assert min(n, cap) <= summary.processed <= min(n, cap + size - 1)

    check()


@pytest.mark.progress
@pytest.mark.property
@pytest.mark.tra("Progress.Snapshot")
@pytest.mark.tier(1)
def test_snapshots_are_monotonic_property() -> None:
    """Property: successive snapshots never move backwards."""
    from hypothesis import given, settings
    from hypothesis.strategies import integers, lists, tuples

    @settings(database=None)
    @given(
        updates=lists(
            tuples(integers(min_value=0, max_value=50), integers(min_value=0, max_value=50)),
            max_size=40,
        )
    )
    def check(updates: list[tuple[int, int]]) -> None:
        aggregator = ProgressAggregator()
        previous = aggregator.snapshot()
        for completed, errors in updates:
            aggregator.add(completed=completed, errors=errors)
            current = aggregator.snapshot()
            assert current.completed >= previous.completed
            assert current.errors >= previous.errors
            assert current.processed == previous.processed + completed + errors
            previous = current

        assert previous.completed == sum(c for c, _ in updates)
        assert previous.errors == sum(e for _, e in updates)

    check()
