"""Cache policy engine.

:func:`execute_with_cache` decides, per :class:`~netresponse.models.CacheStrategy`,
whether the cache is read, whether the network operation runs, and what
gets written back.  Two rules hold for every strategy:

* Only a :class:`~netresponse.response.Success` is written through, and the
  write completes before the outcome is returned.
* The cache never raises into the caller: a bad entry is a miss.

``NETWORK_FIRST`` falls back to the cache only when the operation *raises*
a transport exception.  A returned ``ServerError`` or ``UnknownError`` is
passed through as-is.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional

from netresponse.cache.cache import ResponseCache
from netresponse.exceptions import TRANSPORT_ERRORS, NoCachedDataError
from netresponse.models import CacheConfig, CacheStrategy
from netresponse.response import NetworkError, NetworkResponse, Success

logger = logging.getLogger(__name__)

Operation = Callable[[], Awaitable[NetworkResponse[Any, Any]]]


async def execute_with_cache(
    cache: ResponseCache,
    key: str,
    body_type: Any,
    config: Optional[CacheConfig],
    operation: Operation,
) -> NetworkResponse[Any, Any]:
    """Run *operation* under the cache policy in *config*.

    Args:
        cache: The cache adapter to read from and write through to.
        key: Cache key, usually from :func:`~netresponse.cache.generate_cache_key`.
        body_type: Type descriptor used to decode cached bodies.
        config: Per-call policy.  ``None`` means the defaults
            (``NETWORK_FIRST``, 300 s max age).
        operation: Zero-argument coroutine function performing the network
            call.

    Returns:
        A cached ``Success``, the operation's outcome, or for
        ``CACHE_ONLY`` misses a ``NetworkError`` whose cause is a
        :class:`~netresponse.exceptions.NoCachedDataError`.

    Note:
        Cache reads and writes call the store synchronously on the event
        loop, so a slow disk blocks other tasks for the duration of one
        SQLite operation.  In exchange there is no await point inside a
        read or write, and a cancelled call never leaves a partial entry.

    Raises:
        Exception: Whatever *operation* raises, except transport exceptions
            under ``NETWORK_FIRST``.  Cancellation propagates without
            touching the cache.
    """
    config = config or CacheConfig()
    strategy = config.strategy

    if strategy is CacheStrategy.CACHE_ONLY:
        cached = cache.read(key, body_type, config)
        if cached is not None:
            return cached
        return NetworkError(NoCachedDataError())

    if strategy is CacheStrategy.NETWORK_ONLY:
        return await _fetch_and_store(cache, key, config, operation)

    if strategy is CacheStrategy.NETWORK_FIRST:
        try:
            return await _fetch_and_store(cache, key, config, operation)
        except TRANSPORT_ERRORS as exc:
            logger.debug("Network failed for %s, trying cache: %s", key, exc)
            cached = cache.read(key, body_type, config)
            if cached is not None:
                return cached
            return NetworkError(exc)

    # CACHE_FIRST and CACHE_WITH_EXPIRY differ only in the freshness window
    # applied by ResponseCache.is_valid and in force_refresh.
    skip_read = strategy is CacheStrategy.CACHE_WITH_EXPIRY and config.force_refresh
    if not skip_read:
        cached = cache.read(key, body_type, config)
        if cached is not None:
            return cached
    return await _fetch_and_store(cache, key, config, operation)


async def _fetch_and_store(
    cache: ResponseCache,
    key: str,
    config: CacheConfig,
    operation: Operation,
) -> NetworkResponse[Any, Any]:
    outcome = await operation()
    if isinstance(outcome, Success):
        cache.write(key, outcome, config.max_age_seconds)
    return outcome
