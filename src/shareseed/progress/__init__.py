"""Progress reporters."""

from shareseed.progress.rich_progress import RichProgressReporter


__all__ = ["RichProgressReporter"]
