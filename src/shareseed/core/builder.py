"""Sparse file creation with directory grouping and collision renaming."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from shareseed.core.exceptions import ItemError
from shareseed.core.models import ItemOutcome, WorkItem


if TYPE_CHECKING:
    from shareseed.core.ports import ContentStubProvider, FileSystemPort


logger = logging.getLogger(__name__)

DEFAULT_MAX_COLLISION_ATTEMPTS = 1000

OnCreated = Callable[[WorkItem, Path], None]


def collision_candidates(path: Path, limit: int) -> Iterator[Path]:
    """Yield path, then "name (1).ext", "name (2).ext", ... up to limit names.

    Example:
        >>> [p.name for p in collision_candidates(Path("a/report.docx"), 3)]
        ['report.docx', 'report (1).docx', 'report (2).docx']
    """
    yield path
    stem, suffix = path.stem, path.suffix
    for n in range(1, limit):
        yield path.with_name(f"{stem} ({n}){suffix}")


class BulkFileBuilder:
    """Creates sparse files for work items.

    Existing files are never overwritten: the first free disambiguated name
    is used instead. The filesystem port creates files exclusively, so two
    workers racing for the same name both succeed with distinct paths.
    """

    def __init__(
        self,
        filesystem: FileSystemPort,
        stubs: ContentStubProvider,
        max_collision_attempts: int = DEFAULT_MAX_COLLISION_ATTEMPTS,
    ) -> None:
        self._fs = filesystem
        self._stubs = stubs
        self._max_attempts = max_collision_attempts

    def create_sparse(self, item: WorkItem, *, ensure_parent: bool = True) -> Path:
        """Create one sparse file, renaming on collision.

        Args:
            item: The work item to create.
            ensure_parent: Create the parent directory first. Batch callers
                that already ensured the directory pass False.

        Returns:
            The path actually created.

        Raises:
            ItemError: If the directory, the allocation, or every collision
                candidate failed.
        """
        target = item.target_path
        if ensure_parent:
            self._ensure_dir(target.parent, item)

        stub = self._stubs.stub_for(item.content_type)
        for candidate in collision_candidates(target, self._max_attempts):
            try:
                self._fs.allocate_sparse(candidate, item.size_bytes, stub)
            except FileExistsError:
                continue
            except ItemError:
                raise
            except OSError as e:
                raise ItemError(
                    f"Could not create {candidate}: {e}", path=candidate, cause=e
                ) from e
            if candidate != target:
                logger.debug("Renamed %s to %s after collision", target, candidate.name)
            return candidate

        raise ItemError(
            f"No free name for {target} after {self._max_attempts} attempts",
            path=target,
        )

    def build_batch(
        self,
        items: Sequence[WorkItem],
        on_created: OnCreated | None = None,
    ) -> list[ItemOutcome]:
        """Create every item, one directory at a time.

        Items are grouped by parent directory so each directory is checked
        once. A failed directory fails only its own items; a failed item
        never stops the batch.

        Args:
            items: Work items in submission order.
            on_created: Called with (item, final_path) after each success.

        Returns:
            One outcome per item, in the order of items.
        """
        outcomes: list[ItemOutcome | None] = [None] * len(items)

        for directory, indexes in self._group_by_directory(items).items():
            try:
                self._ensure_dir(directory, items[indexes[0]])
            except ItemError as e:
                logger.warning("Skipping %d items under %s: %s", len(indexes), directory, e)
                for i in indexes:
                    outcomes[i] = ItemOutcome(items[i], error=str(e))
                continue

            for i in indexes:
                outcomes[i] = self._build_one(items[i], on_created)

        return [o for o in outcomes if o is not None]

    def _build_one(self, item: WorkItem, on_created: OnCreated | None) -> ItemOutcome:
        try:
            path = self.create_sparse(item, ensure_parent=False)
        except ItemError as e:
            logger.warning("Item failed: %s", e)
            return ItemOutcome(item, error=str(e))
        if on_created is not None:
            on_created(item, path)
        return ItemOutcome(item, final_path=path)

    @staticmethod
    def _group_by_directory(items: Sequence[WorkItem]) -> dict[Path, list[int]]:
        groups: dict[Path, list[int]] = {}
        for i, item in enumerate(items):
            groups.setdefault(item.target_path.parent, []).append(i)
        return groups

    def _ensure_dir(self, directory: Path, item: WorkItem) -> None:
        try:
            self._fs.ensure_dir(directory)
        except OSError as e:
            raise ItemError(
                f"Could not create directory {directory}: {e}",
                path=item.target_path,
                cause=e,
            ) from e
