"""shareseed - populate file shares with realistic, owned, sparse files.

This library takes a pre-planned list of files, creates them in parallel as
sparse files (so terabytes of "data" cost almost no disk), and assigns
owners drawn from cached directory groups. Progress and errors are counted
thread-safely and summarized at the end; a failed item never stops a run.

Example:
    >>> from shareseed import Engine, EngineConfig, WorkItem
    >>> items = [WorkItem(Path("/srv/share/Finance/q3.xlsx"), size_kb=120, tag="Finance")]
    >>> engine = Engine.from_config(EngineConfig(batch_size=50))
    >>> summary = engine.run(items)
    >>> summary.total_created
    1
"""

from shareseed.adapters.content import TemplateStubProvider
from shareseed.adapters.directory import StaticDirectoryProvider
from shareseed.adapters.executor import SynchronousExecutor, ThreadPoolExecutorAdapter
from shareseed.adapters.filesystem import LocalFileSystem
from shareseed.config import EngineConfig, default_max_workers
from shareseed.core.aggregator import ProgressAggregator
from shareseed.core.builder import BulkFileBuilder
from shareseed.core.directory_cache import DirectoryCache
from shareseed.core.exceptions import (
    AllocationError,
    BatchError,
    ConfigurationError,
    DirectoryUnavailableError,
    ItemError,
    PlanLoadError,
    SchedulerStateError,
    ShareseedError,
)
from shareseed.core.identity import IdentityPolicy, IdentityResolver
from shareseed.core.models import (
    Batch,
    BatchResult,
    DirectoryCacheEntry,
    ItemKind,
    ItemOutcome,
    ProgressState,
    SchedulerState,
    Summary,
    WorkItem,
)
from shareseed.core.monitor import ProgressMonitor
from shareseed.core.pool import WorkerPool
from shareseed.core.ports import (
    ContentStubProvider,
    DirectoryProvider,
    FileSystemPort,
    NullProgressReporter,
    ProgressReporter,
)
from shareseed.core.scheduler import TaskScheduler, split_batches
from shareseed.core.services import Engine
from shareseed.plan import load_plan
from shareseed.progress import RichProgressReporter


__version__ = "0.1.0"

__all__ = [
    "AllocationError",
    "Batch",
    "BatchError",
    "BatchResult",
    "BulkFileBuilder",
    "ConfigurationError",
    "ContentStubProvider",
    "DirectoryCache",
    "DirectoryCacheEntry",
    "DirectoryProvider",
    "DirectoryUnavailableError",
    "Engine",
    "EngineConfig",
    "FileSystemPort",
    "IdentityPolicy",
    "IdentityResolver",
    "ItemError",
    "ItemKind",
    "ItemOutcome",
    "LocalFileSystem",
    "NullProgressReporter",
    "PlanLoadError",
    "ProgressAggregator",
    "ProgressMonitor",
    "ProgressReporter",
    "ProgressState",
    "RichProgressReporter",
    "SchedulerState",
    "SchedulerStateError",
    "ShareseedError",
    "StaticDirectoryProvider",
    "Summary",
    "SynchronousExecutor",
    "TaskScheduler",
    "TemplateStubProvider",
    "ThreadPoolExecutorAdapter",
    "WorkItem",
    "WorkerPool",
    "__version__",
    "default_max_workers",
    "load_plan",
    "split_batches",
]
