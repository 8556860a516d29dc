"""netresponse -- typed outcomes, caching and retry for HTTP API calls.

Every call returns one of four outcome variants (``Success``,
``ServerError``, ``NetworkError``, ``UnknownError``) instead of raising.
On top of a single call, the policy engines decide whether a cache is
consulted, whether the network is hit, how the two are reconciled, and how
failures are retried with capped exponential backoff.

Typical use::

    from netresponse import AsyncClient, CacheConfig, CacheStrategy, RetryConfig
    from netresponse.cache import DiskCacheStore, ResponseCache

    cache = ResponseCache(DiskCacheStore("~/.cache/myapp"))
    async with AsyncClient("https://api.example.com", cache=cache) as client:
        outcome = await client.get(
            "/users", list[User],
            cache_config=CacheConfig(strategy=CacheStrategy.CACHE_FIRST),
            retry_config=RetryConfig(),
        )

Modules:
    response: The outcome variants and helpers.
    models: Pydantic policy and settings models.
    cache: Store, adapter and key generation.
    policy: ``execute_with_cache``, ``execute_with_retry`` and their composition.
    client: The httpx-backed client.
    app: Typer command line.
"""

__version__ = "0.1.0"

from netresponse.cache import DiskCacheStore, ResponseCache, generate_cache_key
from netresponse.client import AsyncClient
from netresponse.models import CacheConfig, CacheStrategy, RetryConfig
from netresponse.policy import (
    execute_with_cache,
    execute_with_retry,
    execute_with_retry_and_cache,
)
from netresponse.response import (
    ErrorResponse,
    NetworkError,
    NetworkResponse,
    ServerError,
    Success,
    UnknownError,
    body_or_none,
    is_error,
)

__all__ = [
    "AsyncClient",
    "CacheConfig",
    "CacheStrategy",
    "DiskCacheStore",
    "ErrorResponse",
    "NetworkError",
    "NetworkResponse",
    "ResponseCache",
    "RetryConfig",
    "ServerError",
    "Success",
    "UnknownError",
    "body_or_none",
    "execute_with_cache",
    "execute_with_retry",
    "execute_with_retry_and_cache",
    "generate_cache_key",
    "is_error",
]
