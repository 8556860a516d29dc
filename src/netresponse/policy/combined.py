"""Retry nested inside the cache policy.

The cache policy treats "the network operation" as a retrying operation:
retries never touch the cache, and only a success from whichever attempt
finally succeeds is written through.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from netresponse.cache.cache import ResponseCache
from netresponse.models import CacheConfig, RetryConfig
from netresponse.policy.cache_policy import Operation, execute_with_cache
from netresponse.policy.retry import Sleep, execute_with_retry
from netresponse.response import NetworkResponse


async def execute_with_retry_and_cache(
    cache: ResponseCache,
    key: str,
    body_type: Any,
    operation: Operation,
    cache_config: Optional[CacheConfig] = None,
    retry_config: Optional[RetryConfig] = None,
    *,
    sleep: Sleep = asyncio.sleep,
) -> NetworkResponse[Any, Any]:
    """Run *operation* with retries, under the cache policy in *cache_config*."""

    async def retrying() -> NetworkResponse[Any, Any]:
        return await execute_with_retry(operation, retry_config, sleep=sleep)

    return await execute_with_cache(cache, key, body_type, cache_config, retrying)
