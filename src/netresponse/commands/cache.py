"""Cache commands -- inspect and prune the response cache.

Provides the ``netresponse cache`` sub-command group.  Every command opens
the same :class:`~netresponse.cache.DiskCacheStore` that ``fetch`` uses,
located by :func:`~netresponse.config.resolve_cache_dir`.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import typer

from netresponse.cache import DiskCacheStore, ResponseCache
from netresponse.client import AsyncClient
from netresponse.config import resolve_cache_dir, resolve_config
from netresponse.exceptions import InvalidUsageError
from netresponse.models import GlobalConfig
from netresponse.output import info, print_table, success


cache_app = typer.Typer(no_args_is_help=True)


def open_cache(config: GlobalConfig, mark_hits: bool = False) -> ResponseCache:
    """Open the on-disk response cache selected by *config*."""
    return ResponseCache(DiskCacheStore(resolve_cache_dir(config)), mark_hits=mark_hits)


def parse_json_body(data: Optional[str]) -> Any:
    """Parse a ``--data`` argument.

    Raises:
        InvalidUsageError: If *data* is not valid JSON.
    """
    if data is None:
        return None
    try:
        return json.loads(data)
    except json.JSONDecodeError as exc:
        raise InvalidUsageError(f"--data is not valid JSON: {exc}") from exc


@cache_app.command("stats")
def cache_stats() -> None:
    """Show the number of cached responses and where they live."""
    cache = open_cache(resolve_config())
    try:
        stats = cache.stats()
    finally:
        cache.close()
    print_table(
        ["Setting", "Value"],
        [[name, str(value)] for name, value in stats.items()],
        title="Response cache",
    )


@cache_app.command("clear")
def cache_clear(ctx: typer.Context) -> None:
    """Delete every cached response.  Asks for confirmation unless ``--force``."""
    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force and not typer.confirm("Delete all cached responses?"):
        info("Cancelled.")
        raise typer.Exit()

    cache = open_cache(resolve_config())
    try:
        cache.clear()
    finally:
        cache.close()
    success("Cache cleared.")


@cache_app.command("sweep")
def cache_sweep() -> None:
    """Delete cached responses older than the max age they were stored with."""
    cache = open_cache(resolve_config())
    try:
        removed = cache.sweep_expired()
    finally:
        cache.close()
    success(f"Removed {removed} expired entr{'y' if removed == 1 else 'ies'}.")


@cache_app.command("invalidate")
def cache_invalidate(
    url: str = typer.Argument(help="Absolute URL of the cached request."),
    method: str = typer.Option("GET", "--method", "-X", help="HTTP method of the cached request."),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="JSON body of the cached request."),
) -> None:
    """Delete the cached response for one request.

    Example::

        netresponse cache invalidate https://api.example.com/users
    """
    key = AsyncClient().cache_key(method, url, json_body=parse_json_body(data))
    cache = open_cache(resolve_config())
    try:
        cache.invalidate(key)
    finally:
        cache.close()
    success(f"Invalidated {method.upper()} {url}")
