"""Built-in CLI command groups and the helpers they share.

Every command that talks to the API opens a :class:`~dolphin.client.DigitalOcean`
through :func:`open_client`, which resolves the configuration and token,
opens the disk cache and the HTTP transport, and closes both afterwards.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import typer

from dolphin.cache import FileCache
from dolphin.client import DigitalOcean
from dolphin.config import get_cache_dir, resolve_config, resolve_token
from dolphin.models import Endpoints, ForceUpdate
from dolphin.output import debug
from dolphin.transport import HttpxTransport


@contextmanager
def open_client() -> Iterator[DigitalOcean]:
    """Yield a client wired from the effective configuration.

    Raises:
        ConfigError: If the config file is invalid or no token is available.
    """
    config = resolve_config()
    token = resolve_token(config)
    cache = FileCache(get_cache_dir(), config.cache)
    try:
        with HttpxTransport(config.request) as transport:
            yield DigitalOcean(
                token,
                transport,
                cache,
                droplet_defaults=config.droplet,
                endpoints=Endpoints(base_url=config.api_url),
            )
    finally:
        cache.close()


def force_update_from(ctx: typer.Context) -> ForceUpdate:
    """Return the cache policy selected by the global ``--force-update`` / ``--cached`` flags."""
    obj = ctx.obj or {}
    mode = obj.get("force_update", ForceUpdate.USE_CACHE_IF_FRESH)
    debug(f"Cache policy: {mode.value}")
    return mode
