"""Directory provider adapters."""

from shareseed.adapters.directory.static import StaticDirectoryProvider


__all__ = ["StaticDirectoryProvider"]
