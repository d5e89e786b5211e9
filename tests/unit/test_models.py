"""Unit tests for core domain models."""

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from shareseed.core.models import (
    Batch,
    BatchResult,
    DirectoryCacheEntry,
    ItemKind,
    ItemOutcome,
    ProgressState,
    Summary,
    WorkItem,
)


@pytest.mark.core
@pytest.mark.tra("Domain.WorkItem")
@pytest.mark.tier(0)
class TestWorkItem:
    """Tests for WorkItem."""

    def test_is_frozen(self) -> None:
        """WorkItem should be immutable once created."""
        item = WorkItem(Path("a/b.txt"), size_kb=1)
        with pytest.raises(AttributeError):
            item.size_kb = 2  # type: ignore[misc]

    def test_negative_size_rejected(self) -> None:
        """A negative size is not a valid plan entry."""
        with pytest.raises(ValueError, match="size_kb"):
            WorkItem(Path("a.txt"), size_kb=-1)

    def test_empty_path_rejected(self) -> None:
        """An empty target path is rejected."""
        with pytest.raises(ValueError, match="target_path"):
            WorkItem(Path(""), size_kb=1)

    def test_string_path_converted(self) -> None:
        """A plain string target path becomes a Path."""
        item = WorkItem("share/Finance/q3.XLSX", size_kb=1)  # type: ignore[arg-type]
        assert item.target_path == Path("share/Finance/q3.XLSX")
        assert item.content_type == "xlsx"

    def test_empty_string_path_rejected(self) -> None:
        with pytest.raises(ValueError, match="target_path"):
            WorkItem("", size_kb=1)  # type: ignore[arg-type]

    def test_size_bytes(self) -> None:
        """size_bytes converts kilobytes to bytes."""
        assert WorkItem(Path("a.txt"), size_kb=3).size_bytes == 3072

    def test_content_type_is_lowercase_extension(self) -> None:
        """Regular files use their extension as content type."""
        assert WorkItem(Path("Q3 Report.PDF"), size_kb=1).content_type == "pdf"

    def test_content_type_without_extension(self) -> None:
        """Files without an extension have an empty content type."""
        assert WorkItem(Path("README"), size_kb=1).content_type == ""

    def test_clutter_content_type(self) -> None:
        """Clutter items always use the clutter stub."""
        item = WorkItem(Path("~$Budget.xlsx"), size_kb=1, kind=ItemKind.CLUTTER)
        assert item.content_type == "clutter"

    def test_with_resolved_path_joins_relative(self, tmp_path: Path) -> None:
        """Relative targets are resolved against the root."""
        item = WorkItem(Path("HR/policy.docx"), size_kb=1, tag="HR")
        resolved = item.with_resolved_path(tmp_path)
        assert resolved.target_path == tmp_path / "HR" / "policy.docx"
        assert resolved.tag == "HR"

    def test_with_resolved_path_keeps_absolute(self, tmp_path: Path) -> None:
        """Absolute targets are unchanged."""
        item = WorkItem(tmp_path / "x.txt", size_kb=1)
        assert item.with_resolved_path(Path("/elsewhere")) is item


@pytest.mark.core
@pytest.mark.tra("Domain.BatchResult")
@pytest.mark.tier(0)
class TestBatchResult:
    """Tests for Batch and BatchResult."""

    def _batch(self, n: int) -> Batch:
        return Batch(index=0, items=tuple(WorkItem(Path(f"{i}.txt"), 1) for i in range(n)))

    def test_batch_len(self) -> None:
        """len(batch) is the number of items."""
        assert len(self._batch(3)) == 3

    def test_failed_counts_every_item_as_error(self) -> None:
        """BatchResult.failed() accounts for every item as an error."""
        result = BatchResult.failed(self._batch(7))
        assert result == BatchResult(created=0, errors=7)

    def test_matches(self) -> None:
        """matches() checks created + errors == len(batch)."""
        batch = self._batch(5)
        assert BatchResult(3, 2).matches(batch)
        assert not BatchResult(3, 3).matches(batch)
        assert not BatchResult(-1, 6).matches(batch)


@pytest.mark.core
@pytest.mark.tier(0)
class TestSmallValues:
    """Tests for the remaining value types."""

    def test_cache_entry_expiry(self) -> None:
        """An entry is expired at or after expires_at."""
        now = datetime(2024, 1, 1, tzinfo=UTC)
        entry = DirectoryCacheEntry("HR", ("carol",), expires_at=now)
        assert entry.is_expired(now)
        assert not entry.is_expired(now - timedelta(seconds=1))

    def test_progress_state_processed(self) -> None:
        """processed is completed plus errors."""
        state = ProgressState(completed=5, errors=2, started_at=datetime.now(UTC))
        assert state.processed == 7

    def test_summary_processed(self) -> None:
        """Summary.processed is created plus errors."""
        summary = Summary(total_created=10, total_errors=1, duration=timedelta(0))
        assert summary.processed == 11
        assert summary.stopped_by_cap is False

    def test_item_outcome_ok(self) -> None:
        """An outcome is ok only with a final path and no error."""
        item = WorkItem(Path("a.txt"), 1)
        assert ItemOutcome(item, final_path=Path("a.txt")).ok
        assert not ItemOutcome(item, error="boom").ok
