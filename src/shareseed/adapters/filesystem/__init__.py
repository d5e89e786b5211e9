"""Filesystem adapters."""

from shareseed.adapters.filesystem.local import LocalFileSystem


__all__ = ["LocalFileSystem"]
