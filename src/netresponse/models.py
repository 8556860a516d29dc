"""Canonical Pydantic models shared across netresponse modules.

The models fall into two groups:

**Per-call policy models** -- immutable values handed to the engines:
    :class:`CacheStrategy`, :class:`CacheConfig` and :class:`RetryConfig`.

**Settings models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`OutputConfig` and :class:`GlobalConfig`.

The persisted cache record, :class:`~netresponse.cache.store.CacheEntry`,
lives next to the store that owns it.
"""

from __future__ import annotations

import enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from netresponse.response import is_error


class CacheStrategy(str, enum.Enum):
    """Named cache policies understood by :func:`~netresponse.policy.execute_with_cache`."""

    NETWORK_FIRST = "network_first"
    """Call the network; fall back to a valid cache entry on transport failure."""

    CACHE_FIRST = "cache_first"
    """Serve a valid cache entry; call the network on a miss."""

    NETWORK_ONLY = "network_only"
    """Always call the network; still write successes through to the cache."""

    CACHE_ONLY = "cache_only"
    """Never call the network."""

    CACHE_WITH_EXPIRY = "cache_with_expiry"
    """Like ``CACHE_FIRST`` but with the max-age window and a force-refresh switch."""


class CacheConfig(BaseModel):
    """Cache policy for a single call.

    Example::

        CacheConfig(strategy=CacheStrategy.CACHE_FIRST, max_age_seconds=60)
    """

    model_config = ConfigDict(frozen=True)

    strategy: CacheStrategy = Field(
        default=CacheStrategy.NETWORK_FIRST, description="Orchestration strategy"
    )
    max_age_seconds: int = Field(
        default=300, ge=0, description="Freshness window and stored entry lifetime"
    )
    stale_while_revalidate_seconds: int = Field(
        default=3600, ge=0, description="Freshness window used by CACHE_FIRST"
    )
    force_refresh: bool = Field(
        default=False, description="CACHE_WITH_EXPIRY only: skip the cache read"
    )


def default_should_retry(outcome: Any) -> bool:
    """Retry on any error variant."""
    return is_error(outcome)


class RetryConfig(BaseModel):
    """Exponential backoff policy for :func:`~netresponse.policy.execute_with_retry`.

    Delays are expressed in milliseconds.  ``should_retry`` is excluded
    from serialisation so the model round-trips through the JSON config
    file with the default predicate restored on load.
    """

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, description="Total invocations, including the first")
    initial_delay_ms: int = Field(default=100, ge=0, description="Delay before the second attempt")
    max_delay_ms: int = Field(default=1000, ge=0, description="Upper bound for any single delay")
    factor: float = Field(default=2.0, gt=0, description="Delay multiplier applied after each wait")
    should_retry: Callable[[Any], bool] = Field(
        default=default_should_retry, exclude=True
    )


class RequestConfig(BaseModel):
    """Transport settings applied to every call made by the command line."""

    timeout: float = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class OutputConfig(BaseModel):
    """Default output format preference stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/netresponse/config.json``.

    Loaded and saved by :func:`~netresponse.config.load_global_config` and
    :func:`~netresponse.config.save_global_config`.  See
    :func:`~netresponse.config.resolve_config` for the precedence chain.
    """

    cache_dir: Optional[str] = Field(
        default=None, description="Override the cache directory"
    )
    cache: CacheConfig = Field(default_factory=CacheConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
