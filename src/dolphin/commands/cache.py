"""Cache commands -- inspect and empty the response cache."""

from __future__ import annotations

import typer

from dolphin.output import format_response, success

cache_app = typer.Typer(no_args_is_help=True)


def _open_cache():
    from dolphin.cache import FileCache
    from dolphin.config import get_cache_dir, resolve_config

    return FileCache(get_cache_dir(), resolve_config().cache)


@cache_app.command("stats")
def cache_stats() -> None:
    """Show the number of cached responses, their location and TTL."""
    cache = _open_cache()
    try:
        format_response(cache.stats())
    finally:
        cache.close()


@cache_app.command("clear")
def cache_clear() -> None:
    """Drop every cached response."""
    cache = _open_cache()
    try:
        cache.clear()
    finally:
        cache.close()
    success("Cache cleared.")
