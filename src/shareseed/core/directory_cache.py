"""Time-bounded cache of directory group membership."""

from __future__ import annotations

import logging
import random
import threading
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from shareseed.config import DEFAULT_CACHE_TTL_SECONDS
from shareseed.core.exceptions import DirectoryUnavailableError
from shareseed.core.models import DirectoryCacheEntry


if TYPE_CHECKING:
    from shareseed.core.ports import DirectoryProvider


logger = logging.getLogger(__name__)

DEFAULT_RETRY_INTERVAL = 30.0


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _normalize_key(key: str) -> str:
    return key.strip().casefold()


class _Refresh:
    """One in-flight refresh that concurrent warm() callers wait on."""

    __slots__ = ("done", "error")

    def __init__(self) -> None:
        self.done = threading.Event()
        self.error: DirectoryUnavailableError | None = None


class DirectoryCache:
    """Read-mostly cache of group -> members plus the current domain.

    Entries are populated in bulk by warm(), never lazily on lookup, so the
    hot path never waits on the directory service. A lookup miss means the
    caller must use a fallback identity.

    warm() is single-flighted: while one thread is refreshing, other callers
    block on that refresh and share its outcome instead of issuing their own
    provider calls.

    Example:
        >>> cache = DirectoryCache(provider, keys=["Finance", "HR"])
        >>> cache.warm()
        >>> cache.resolve_random_member("finance")
        'alice'
    """

    def __init__(
        self,
        provider: DirectoryProvider,
        keys: Iterable[str] | None = None,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        *,
        retry_interval: float = DEFAULT_RETRY_INTERVAL,
        clock: Callable[[], datetime] = _utcnow,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize an empty cache.

        Args:
            provider: Directory service to fetch groups from.
            keys: Group keys to keep warm. None asks the provider for its
                group list on every refresh.
            ttl_seconds: Lifetime of a fetched entry.
            retry_interval: Seconds after a failed refresh during which
                non-forced warm() calls skip the provider.
            clock: Returns the current UTC time.
            rng: Random source for member selection.
        """
        self._provider = provider
        self._keys = [k for k in keys if k.strip()] if keys is not None else None
        self._ttl = timedelta(seconds=ttl_seconds)
        self._retry_interval = timedelta(seconds=retry_interval)
        self._clock = clock
        self._rng = rng or random.Random()
        self._rng_lock = threading.Lock()

        self._lock = threading.Lock()
        self._entries: dict[str, DirectoryCacheEntry] = {}
        self._domain: str | None = None
        self._refresh: _Refresh | None = None
        self._failed_at: datetime | None = None
        self._loaded_until: datetime | None = None

    @property
    def ttl(self) -> timedelta:
        """Lifetime of a cached entry."""
        return self._ttl

    @property
    def current_domain(self) -> str | None:
        """Domain resolved by the last successful refresh."""
        with self._lock:
            return self._domain

    def lookup(self, key: str) -> DirectoryCacheEntry | None:
        """Return the cached entry for key if present and unexpired.

        Never calls the directory service.
        """
        now = self._clock()
        with self._lock:
            entry = self._entries.get(_normalize_key(key))
        if entry is None or entry.is_expired(now):
            return None
        return entry

    def resolve_random_member(self, group_key: str) -> str | None:
        """Pick one member of a cached group, or None on a miss or empty group."""
        entry = self.lookup(group_key)
        if entry is None or not entry.members:
            return None
        with self._rng_lock:
            return self._rng.choice(entry.members)

    def keys(self) -> list[str]:
        """Keys of every unexpired entry, as the provider spelled them."""
        now = self._clock()
        with self._lock:
            return sorted(
                e.key for e in self._entries.values() if not e.is_expired(now)
            )

    def invalidate(self, key: str | None = None) -> None:
        """Drop one entry, or every entry when key is None."""
        with self._lock:
            if key is None:
                self._entries.clear()
                self._domain = None
                self._loaded_until = None
            else:
                self._entries.pop(_normalize_key(key), None)

    def warm(self, force: bool = False) -> None:
        """Populate every tracked group in one bulk refresh.

        Idempotent: returns immediately when nothing is stale and force is
        False. Concurrent callers collapse into a single refresh.

        Args:
            force: Refresh even if every entry is still fresh, and ignore
                the retry interval after a previous failure.

        Raises:
            DirectoryUnavailableError: If the provider failed. Entries cached
                before the failure are kept.
        """
        with self._lock:
            refresh = self._refresh
            leader = refresh is None
            if leader:
                if not force and self._skip_refresh_locked():
                    return
                refresh = self._refresh = _Refresh()

        if not leader:
            refresh.done.wait()
            if refresh.error is not None:
                raise refresh.error
            return

        try:
            self._do_refresh()
        except DirectoryUnavailableError as e:
            refresh.error = e
            raise
        finally:
            with self._lock:
                self._failed_at = self._clock() if refresh.error else None
                self._refresh = None
            refresh.done.set()

    def _skip_refresh_locked(self) -> bool:
        now = self._clock()
        if self._failed_at is not None and now - self._failed_at < self._retry_interval:
            return True
        if not self._entries:
            # An empty directory counts as loaded until the TTL runs out.
            return self._loaded_until is not None and now < self._loaded_until
        if any(e.is_expired(now) for e in self._entries.values()):
            return False
        if self._keys is not None:
            return all(_normalize_key(k) in self._entries for k in self._keys)
        return True

    def _do_refresh(self) -> None:
        try:
            keys = self._keys if self._keys is not None else self._provider.list_groups()
            domain = self._provider.current_domain()
        except Exception as e:
            logger.warning("Directory service unavailable: %s", e)
            raise DirectoryUnavailableError(
                f"Could not list directory groups: {e}", cause=e
            ) from e

        fetched: dict[str, DirectoryCacheEntry] = {}
        failed: list[str] = []
        last_error: Exception | None = None
        for key in keys:
            try:
                members = self._provider.fetch_group(key)
            except Exception as e:
                logger.debug("Fetching group %r failed: %s", key, e)
                failed.append(key)
                last_error = e
                continue
            fetched[_normalize_key(key)] = DirectoryCacheEntry(
                key=key,
                members=tuple(members),
                expires_at=self._clock() + self._ttl,
            )

        with self._lock:
            if self._keys is None:
                # Groups the provider stopped listing would stay expired forever.
                listed = {_normalize_key(k) for k in keys}
                for gone in [k for k in self._entries if k not in listed]:
                    del self._entries[gone]
            self._entries.update(fetched)
            if domain is not None:
                self._domain = domain
            if not failed:
                self._loaded_until = self._clock() + self._ttl

        logger.info(
            "Directory cache refreshed: %d groups cached, %d failed",
            len(fetched),
            len(failed),
        )
        if failed:
            raise DirectoryUnavailableError(
                f"Could not fetch {len(failed)} of {len(keys)} directory groups",
                keys=failed,
                cause=last_error,
            )
