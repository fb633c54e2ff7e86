"""Disk-based cache of raw response bodies keyed by endpoint URL.

Uses :mod:`diskcache` to persist bodies on the filesystem. Expiry is
tracked here rather than by :mod:`diskcache` itself: an entry outlives
its TTL on disk so that :meth:`FileCache.get_cached` can still return it
when the caller asks for a stale-but-present body.

See Also:
    :class:`~dolphin.models.CacheConfig` -- the Pydantic model that
    controls ``enabled`` and ``ttl_seconds``.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Callable, Optional, Protocol

import diskcache

from dolphin.models import CacheConfig

logger = logging.getLogger(__name__)


class Cache(Protocol):
    """The three operations the API client needs from a cache store."""

    def get_cached(self, key: str) -> Optional[str]: ...

    def get_cached_unless_expired(self, key: str) -> Optional[str]: ...

    def save(self, value: str, key: str) -> None: ...


class FileCache:
    """Disk-backed store of response bodies with save-time expiry.

    Each entry is a small dict holding the body and the time it was
    saved. An entry is *expired* once ``ttl_seconds`` have elapsed since
    that time.

    Args:
        cache_dir: Root directory for the cache. A ``responses/``
            subdirectory is created inside it.
        config: Cache configuration (``enabled`` flag and ``ttl_seconds``).
        clock: Source of the current time in seconds. Defaults to
            :func:`time.time`.

    Example::

        from dolphin.cache import FileCache
        from dolphin.models import CacheConfig

        cache = FileCache("/tmp/do-cache", CacheConfig(ttl_seconds=300))
        cache.save('{"regions": []}', "https://api.digitalocean.com/v2/regions")
        body = cache.get_cached_unless_expired("https://api.digitalocean.com/v2/regions")
    """

    def __init__(
        self,
        cache_dir: str | Path,
        config: Optional[CacheConfig] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config or CacheConfig()
        self._clock = clock
        self._cache: Optional[diskcache.Cache] = None
        self._cache_dir = Path(cache_dir)
        if self._config.enabled:
            self._cache = diskcache.Cache(str(self._cache_dir / "responses"))

    def get_cached(self, key: str) -> Optional[str]:
        """Return the stored body for *key* whether or not it has expired.

        Returns:
            The body string, or ``None`` on a miss or when caching is
            disabled.
        """
        entry = self._load(key)
        if entry is None:
            return None
        return entry["body"]

    def get_cached_unless_expired(self, key: str) -> Optional[str]:
        """Return the stored body for *key* only while it is still fresh.

        Returns:
            The body string, or ``None`` on a miss, an expired entry, or
            when caching is disabled.
        """
        entry = self._load(key)
        if entry is None:
            return None
        age = self._clock() - entry["saved_at"]
        if age >= self._config.ttl_seconds:
            logger.debug("Cache entry expired: %s (age %.0fs)", key, age)
            return None
        return entry["body"]

    def save(self, value: str, key: str) -> None:
        """Store *value* under *key*, stamping it with the current time.

        Any previous entry for *key* is replaced. A no-op when caching is
        disabled.
        """
        if self._cache is None:
            return
        self._cache.set(key, {"body": value, "saved_at": self._clock()})
        logger.debug("Cached %d bytes for %s", len(value), key)

    def invalidate(self, key: str) -> None:
        """Remove the entry for *key* if present."""
        if self._cache is None:
            return
        self._cache.delete(key)

    def clear(self) -> None:
        """Remove all entries from the cache.

        When caching is disabled, a store left on disk from when it was
        enabled is opened and emptied as well.
        """
        if self._cache is not None:
            self._cache.clear()
            return
        directory = self._cache_dir / "responses"
        if directory.is_dir():
            with diskcache.Cache(str(directory)) as store:
                store.clear()
            logger.debug("Cleared disabled cache at %s", directory)

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``enabled`` (bool), and when enabled:
            ``size`` (number of entries), ``directory`` (str path), and
            ``ttl_seconds`` (int).
        """
        if self._cache is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": len(self._cache),
            "directory": str(self._cache_dir / "responses"),
            "ttl_seconds": self._config.ttl_seconds,
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        if self._cache is not None:
            self._cache.close()

    def _load(self, key: str) -> Optional[dict[str, Any]]:
        if self._cache is None:
            return None
        return self._cache.get(key)
