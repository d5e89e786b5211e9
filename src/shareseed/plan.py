"""Plan file loading.

A plan is the materialized work list produced by an external generator,
stored as JSON Lines (one object per line) or as a single JSON array:

    {"target_path": "Finance/Budget 2024.xlsx", "size_kb": 88, "tag": "Finance"}
    {"target_path": "Finance/~$Budget 2024.xlsx", "size_kb": 1, "kind": "clutter"}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from shareseed.core.exceptions import PlanLoadError
from shareseed.core.models import ItemKind, WorkItem


def load_plan(path: Path, root: Path | None = None) -> list[WorkItem]:
    """Load work items from a plan file.

    Args:
        path: Plan file (JSON Lines or JSON array).
        root: Directory that relative target paths are resolved against.
            Defaults to the plan file's directory.

    Returns:
        Work items in file order, with resolved target paths.

    Raises:
        PlanLoadError: If the file is missing or any record is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise PlanLoadError(f"Could not read plan {path}: {e}", plan_path=path, cause=e) from e

    base = root if root is not None else path.parent
    if text.lstrip().startswith("["):
        records = _parse_array(text, path)
    else:
        records = _parse_lines(text, path)

    return [
        _to_item(record, path, line).with_resolved_path(base) for line, record in records
    ]


def _parse_array(text: str, path: Path) -> list[tuple[int | None, Any]]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise PlanLoadError(
            f"Invalid JSON in plan: {e.msg}", plan_path=path, line=e.lineno, cause=e
        ) from e
    return [(None, record) for record in data]


def _parse_lines(text: str, path: Path) -> list[tuple[int | None, Any]]:
    records: list[tuple[int | None, Any]] = []
    for lineno, line in enumerate(text.splitlines(), 1):
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        try:
            records.append((lineno, json.loads(line)))
        except json.JSONDecodeError as e:
            raise PlanLoadError(
                f"Invalid JSON on line {lineno}: {e.msg}",
                plan_path=path,
                line=lineno,
                cause=e,
            ) from e
    return records


def _to_item(record: Any, path: Path, line: int | None) -> WorkItem:
    where = f"line {line}" if line else "plan"
    if not isinstance(record, dict):
        raise PlanLoadError(f"Expected an object on {where}", plan_path=path, line=line)
    try:
        return WorkItem(
            target_path=Path(record["target_path"]),
            size_kb=int(record["size_kb"]),
            tag=str(record.get("tag", "")),
            kind=ItemKind(record.get("kind", ItemKind.FILE)),
        )
    except KeyError as e:
        raise PlanLoadError(
            f"Missing field {e.args[0]!r} on {where}", plan_path=path, line=line, cause=e
        ) from e
    except (TypeError, ValueError) as e:
        raise PlanLoadError(
            f"Invalid record on {where}: {e}", plan_path=path, line=line, cause=e
        ) from e


def dump_plan(items: list[WorkItem], path: Path) -> None:
    """Write items as JSON Lines, the inverse of load_plan()."""
    with path.open("w", encoding="utf-8") as f:
        for item in items:
            record = {
                "target_path": str(item.target_path),
                "size_kb": item.size_kb,
                "tag": item.tag,
                "kind": item.kind.value,
            }
            f.write(json.dumps(record) + "\n")
