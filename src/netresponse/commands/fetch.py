"""The ``fetch`` command -- one HTTP call through the cache and retry engines.

The command resolves the effective configuration, applies per-call
overrides from the flags, runs the call with
:class:`~netresponse.client.AsyncClient`, prints the outcome and exits
with :func:`~netresponse.client.response.exit_code_for`.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import typer

from netresponse.client import AsyncClient
from netresponse.client.response import exit_code_for, format_outcome
from netresponse.commands.cache import open_cache, parse_json_body
from netresponse.config import resolve_config
from netresponse.models import CacheConfig, CacheStrategy, GlobalConfig, RetryConfig
from netresponse.output import debug, warning
from netresponse.response import NetworkResponse


async def _run(
    config: GlobalConfig,
    method: str,
    url: str,
    body_type: Any,
    json_body: Any,
    cache_config: Optional[CacheConfig],
    retry_config: RetryConfig,
) -> NetworkResponse[Any, Any]:
    cache = open_cache(config, mark_hits=True) if cache_config is not None else None
    try:
        async with AsyncClient(request=config.request, cache=cache) as client:
            return await client.request(
                method,
                url,
                body_type,
                json_body=json_body,
                cache_config=cache_config,
                retry_config=retry_config,
            )
    finally:
        if cache is not None:
            cache.close()


def fetch_command(
    url: str = typer.Argument(help="Absolute URL to request."),
    method: str = typer.Option("GET", "--method", "-X", help="HTTP method."),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="JSON request body."),
    strategy: Optional[CacheStrategy] = typer.Option(
        None, "--strategy", "-s", case_sensitive=False, help="Cache strategy for this call."
    ),
    max_age: Optional[int] = typer.Option(None, "--max-age", help="Max age in seconds."),
    stale: Optional[int] = typer.Option(
        None, "--stale", help="Stale-while-revalidate window in seconds (cache_first)."
    ),
    force_refresh: bool = typer.Option(
        False, "--force-refresh", help="Skip the cache read (cache_with_expiry)."
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the cache entirely."),
    retries: Optional[int] = typer.Option(None, "--retries", help="Total attempts, including the first."),
    raw: bool = typer.Option(False, "--raw", help="Treat the body as text instead of JSON."),
) -> None:
    """Fetch URL and print the response body.

    Example::

        netresponse fetch https://api.example.com/users --strategy cache_first
        netresponse fetch https://api.example.com/users -X POST -d '{"name": "ada"}' --no-cache
    """
    config = resolve_config(cli_strategy=strategy)
    json_body = parse_json_body(data)

    cache_config: Optional[CacheConfig] = None
    if not no_cache:
        overrides: dict[str, Any] = {"force_refresh": force_refresh}
        if max_age is not None:
            overrides["max_age_seconds"] = max_age
        if stale is not None:
            overrides["stale_while_revalidate_seconds"] = stale
        cache_config = config.cache.model_copy(update=overrides)
        if force_refresh and cache_config.strategy is not CacheStrategy.CACHE_WITH_EXPIRY:
            warning(
                f"--force-refresh only applies to cache_with_expiry; "
                f"ignored for {cache_config.strategy.value}"
            )
    elif strategy is not None or force_refresh:
        warning("--no-cache bypasses the cache; --strategy and --force-refresh are ignored")

    retry_config = config.retry
    if retries is not None:
        retry_config = retry_config.model_copy(update={"max_attempts": retries})

    debug(
        f"{method.upper()} {url} strategy="
        f"{cache_config.strategy.value if cache_config else 'none'} attempts={retry_config.max_attempts}"
    )
    outcome = asyncio.run(
        _run(config, method.upper(), url, str if raw else Any, json_body, cache_config, retry_config)
    )
    format_outcome(outcome)
    code = exit_code_for(outcome)
    if code:
        raise typer.Exit(code=code)
