"""Retry engine with capped exponential backoff.

:func:`execute_with_retry` re-invokes an operation while its outcome
satisfies ``should_retry`` and attempts remain.  It never invents an error
of its own: the last attempt's outcome, or exception, is what the caller
gets.

A transport exception raised by an attempt that is *not* the last one is
treated as a :class:`~netresponse.response.NetworkError` outcome, so
timeouts and refused connections are retryable under the default
predicate.  The last attempt is not wrapped, which keeps
``NETWORK_FIRST``'s cache fallback working when retries are composed
inside it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterator, Optional

from netresponse.exceptions import TRANSPORT_ERRORS
from netresponse.models import RetryConfig
from netresponse.response import NetworkError, NetworkResponse

logger = logging.getLogger(__name__)

Operation = Callable[[], Awaitable[NetworkResponse[Any, Any]]]
Sleep = Callable[[float], Awaitable[Any]]


def backoff_delays(initial_delay_ms: int, factor: float, max_delay_ms: int) -> Iterator[int]:
    """Yield the inter-attempt delays in milliseconds, forever.

    For ``initial_delay_ms=100, factor=2.0, max_delay_ms=1000`` the
    sequence is ``100, 200, 400, 800, 1000, 1000, ...``.
    """
    delay = initial_delay_ms
    while True:
        yield delay
        delay = min(int(delay * factor), max_delay_ms)


async def execute_with_retry(
    operation: Operation,
    config: Optional[RetryConfig] = None,
    *,
    sleep: Sleep = asyncio.sleep,
) -> NetworkResponse[Any, Any]:
    """Run *operation* up to ``config.max_attempts`` times.

    Args:
        operation: Zero-argument coroutine function returning an outcome.
        config: Backoff policy; defaults to :class:`RetryConfig()`.
        sleep: Coroutine used to wait between attempts, taking seconds.

    Returns:
        The first outcome that should not be retried, or the final
        attempt's outcome.
    """
    config = config or RetryConfig()
    delays = backoff_delays(config.initial_delay_ms, config.factor, config.max_delay_ms)

    for attempt in range(1, config.max_attempts):
        try:
            outcome = await operation()
        except TRANSPORT_ERRORS as exc:
            outcome = NetworkError(exc)
        if not config.should_retry(outcome):
            return outcome
        delay_ms = next(delays)
        logger.debug(
            "Attempt %d/%d returned %s, retrying in %dms",
            attempt, config.max_attempts, type(outcome).__name__, delay_ms,
        )
        await sleep(delay_ms / 1000)

    return await operation()
