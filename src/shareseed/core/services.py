"""Core domain services for shareseed."""

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from shareseed.config import EngineConfig
from shareseed.core.aggregator import ProgressAggregator
from shareseed.core.builder import BulkFileBuilder
from shareseed.core.directory_cache import DirectoryCache
from shareseed.core.exceptions import DirectoryUnavailableError
from shareseed.core.identity import IdentityPolicy, IdentityResolver
from shareseed.core.models import Batch, BatchResult, Summary, WorkItem
from shareseed.core.monitor import ProgressMonitor
from shareseed.core.pool import WorkerPool
from shareseed.core.ports import (
    ContentStubProvider,
    DirectoryProvider,
    ExecutorFactory,
    FileSystemPort,
    NullProgressReporter,
    ProgressReporter,
)
from shareseed.core.scheduler import TaskScheduler


logger = logging.getLogger(__name__)


class Engine:
    """Orchestrates a run: directory warm-up, batching, workers and progress.

    Each batch goes through the same pipeline: refresh the directory cache if
    it went stale, create the batch's files, then assign an owner to every
    created file.
    """

    def __init__(
        self,
        filesystem: FileSystemPort,
        directory: DirectoryCache,
        stubs: ContentStubProvider,
        config: EngineConfig | None = None,
        identity: IdentityPolicy | None = None,
        executor_factory: ExecutorFactory | None = None,
    ) -> None:
        self._fs = filesystem
        self._directory = directory
        self._config = config or EngineConfig()
        self._builder = BulkFileBuilder(filesystem, stubs)
        self._resolver = IdentityResolver(directory, identity)
        self._executor_factory = executor_factory

    @classmethod
    def from_config(
        cls,
        config: EngineConfig | None = None,
        provider: DirectoryProvider | None = None,
        *,
        group_keys: Iterable[str] | None = None,
        identity: IdentityPolicy | None = None,
        apply_ownership: bool = False,
    ) -> "Engine":
        """Create an Engine backed by the local filesystem and default adapters.

        Args:
            config: Engine configuration. Defaults to EngineConfig().
            provider: Directory service. Defaults to an empty directory, which
                makes every owner the fallback identity.
            group_keys: Groups to keep warm. None caches every group the
                provider lists.
            identity: Owner resolution policy.
            apply_ownership: Actually chown created files.

        Returns:
            Engine with LocalFileSystem, TemplateStubProvider and a
            DirectoryCache using config.cache_ttl_seconds.
        """
        from shareseed.adapters.content import TemplateStubProvider
        from shareseed.adapters.directory import StaticDirectoryProvider
        from shareseed.adapters.filesystem import LocalFileSystem

        config = config or EngineConfig()
        directory = DirectoryCache(
            provider if provider is not None else StaticDirectoryProvider({}),
            keys=group_keys,
            ttl_seconds=config.cache_ttl_seconds,
        )
        return cls(
            filesystem=LocalFileSystem(apply_ownership=apply_ownership),
            directory=directory,
            stubs=TemplateStubProvider(),
            config=config,
            identity=identity,
        )

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def directory(self) -> DirectoryCache:
        return self._directory

    def run(
        self,
        items: Sequence[WorkItem],
        progress: ProgressReporter | None = None,
        aggregator: ProgressAggregator | None = None,
    ) -> Summary:
        """Create every work item and return the run summary.

        Args:
            items: Fully resolved work items.
            progress: Optional reporter refreshed every config.report_interval.
            aggregator: Optional aggregator to poll from another thread while
                the run is in progress. A fresh one is used otherwise.

        Returns:
            Summary of the run. Its processed count equals len(items) unless
            the cap stopped submission early.

        Raises:
            ConfigurationError: If the configuration is invalid. Nothing is
                created in that case.
        """
        self._config.validate()
        if progress is None:
            progress = NullProgressReporter()
        if aggregator is None:
            aggregator = ProgressAggregator()

        self._refresh_directory()

        max_workers = self._config.workers_for(len(items))
        logger.info(
            "Starting run: %d items, batch size %d, %d workers",
            len(items),
            self._config.batch_size,
            max_workers,
        )
        scheduler = TaskScheduler(
            WorkerPool(self._executor_factory),
            aggregator,
            self.process_batch,
            max_workers=max_workers,
        )
        total = len(items)
        if self._config.cap is not None:
            total = min(total, self._config.cap)

        with ProgressMonitor(
            aggregator, progress, total=total, interval=self._config.report_interval
        ):
            return scheduler.execute(items, self._config.batch_size, self._config.cap)

    def process_batch(self, batch: Batch) -> BatchResult:
        """Create one batch's files and assign their owners."""
        self._refresh_directory()
        outcomes = self._builder.build_batch(batch.items, on_created=self._assign_owner)
        created = sum(1 for o in outcomes if o.ok)
        return BatchResult(created=created, errors=len(outcomes) - created)

    def _assign_owner(self, item: WorkItem, path: Path) -> None:
        # The file exists at this point; ownership problems must not fail it.
        try:
            owner = self._resolver.resolve_item(item).owner
        except Exception as e:
            owner = self._resolver.policy.fallback_owner
            logger.warning(
                "Could not resolve owner for tag %r: %s; using %s", item.tag, e, owner
            )
        try:
            self._fs.set_owner(path, owner)
        except (OSError, LookupError) as e:
            logger.warning("Could not set owner %s on %s: %s", owner, path, e)

    def _refresh_directory(self) -> None:
        try:
            self._directory.warm()
        except DirectoryUnavailableError as e:
            logger.warning("%s; using fallback owners where needed", e)
