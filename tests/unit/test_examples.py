"""Tests validating that example code patterns work correctly.

These tests ensure the examples in the examples/ directory represent
working, copy-pasteable code patterns.
"""

from pathlib import Path

import pytest

from shareseed import (
    ConfigurationError,
    Engine,
    EngineConfig,
    IdentityPolicy,
    LocalFileSystem,
    StaticDirectoryProvider,
    WorkItem,
    load_plan,
)


@pytest.mark.core
class TestBasicRun:
    """Tests for basic_run.py example pattern."""

    def test_mapped_tags_get_qualified_members(self, tmp_path: Path) -> None:
        """Tags mapped to groups get domain-qualified owners."""
        items = [
            WorkItem(tmp_path / "Human_Resources" / f"Review {i}.docx", size_kb=64, tag="Human Resources")
            for i in range(5)
        ]
        engine = Engine.from_config(
            EngineConfig(batch_size=2),
            StaticDirectoryProvider({"HR": ["carol"]}, domain="CORP"),
            identity=IdentityPolicy(
                group_for_tag={"Human Resources": "HR"}, qualify_with_domain=True
            ),
        )
        summary = engine.run(items)

        assert summary.total_created == 5
        assert engine.directory.current_domain == "CORP"
        assert all(i.target_path.stat().st_size == 64 * 1024 for i in items)

    def test_files_are_sparse_where_supported(self, tmp_path: Path) -> None:
        """Large planned sizes cost little real disk."""
        item = WorkItem(tmp_path / "Finance" / "archive.zip", size_kb=32 * 1024)
        Engine.from_config().run([item])

        assert item.target_path.stat().st_size == 32 * 1024 * 1024
        assert LocalFileSystem().allocated_bytes(item.target_path) <= 32 * 1024 * 1024


@pytest.mark.core
class TestErrorHandling:
    """Tests for error_handling.py example patterns."""

    def test_config_error_has_hint(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            EngineConfig(batch_size=0).validate()
        assert exc_info.value.recovery_hint == "Check the value of 'batch_size'"

    def test_item_failures_are_counted_not_raised(self, tmp_path: Path) -> None:
        """A blocked directory shows up in the summary, not as an exception."""
        (tmp_path / "blocked").write_text("a file, not a folder")
        items = [
            WorkItem(tmp_path / "blocked" / "a.txt", size_kb=1),
            WorkItem(tmp_path / "ok" / "b.txt", size_kb=1),
        ]
        summary = Engine.from_config().run(items)
        assert (summary.total_created, summary.total_errors) == (1, 1)

    def test_plan_round_trip_through_file(self, tmp_path: Path) -> None:
        plan = tmp_path / "plan.jsonl"
        plan.write_text('{"target_path": "x/a.txt", "size_kb": 1, "tag": "HR"}\n')
        summary = Engine.from_config().run(load_plan(plan))
        assert summary.total_created == 1
        assert (tmp_path / "x" / "a.txt").exists()
