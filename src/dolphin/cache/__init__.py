"""Disk-based response caching for dolphin.

This package provides :class:`FileCache`, the store that
:class:`~dolphin.client.DigitalOcean` consults before every read. Entries
are keyed by endpoint URL and persisted with :mod:`diskcache`; each one
remembers when it was saved so that callers can choose between an
expiry-aware read and a read that ignores expiry.

The cache is controlled by the ``cache`` section of the global
configuration (:class:`~dolphin.models.CacheConfig`).
"""

from dolphin.cache.cache import Cache, FileCache

__all__ = ["Cache", "FileCache"]
