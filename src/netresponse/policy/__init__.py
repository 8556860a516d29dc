"""Execution policies layered on top of a single network operation.

* :func:`execute_with_cache` -- strategy-driven cache orchestration.
* :func:`execute_with_retry` -- capped exponential backoff.
* :func:`execute_with_retry_and_cache` -- retry nested inside the cache policy.

Each takes a zero-argument coroutine function returning a
:data:`~netresponse.response.NetworkResponse` and returns one.
"""

from netresponse.policy.cache_policy import execute_with_cache
from netresponse.policy.combined import execute_with_retry_and_cache
from netresponse.policy.retry import backoff_delays, execute_with_retry

__all__ = [
    "backoff_delays",
    "execute_with_cache",
    "execute_with_retry",
    "execute_with_retry_and_cache",
]
