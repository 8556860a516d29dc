"""Cache store adapter: typed reads and writes with freshness evaluation.

:class:`ResponseCache` turns a cache key plus a body type descriptor into
a :class:`~netresponse.response.Success` and back.  A missing, stale or
corrupted entry is a miss, and a failed write is logged and forgotten.
Nothing in here raises to the caller.

Freshness depends on the strategy of the call doing the read:

==================  ===========================================
strategy            entry is valid when
==================  ===========================================
CACHE_ONLY          always
CACHE_WITH_EXPIRY   ``age <= max_age_seconds``
CACHE_FIRST         ``age <= stale_while_revalidate_seconds``
NETWORK_FIRST       ``age <= max_age_seconds``
NETWORK_ONLY        ``age <= max_age_seconds``
==================  ===========================================

``age`` is whole seconds since the entry was stored.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from netresponse.cache.store import CacheEntry, CacheStore
from netresponse.models import CacheConfig, CacheStrategy
from netresponse.response import Headers, Success, mark_as_from_cache
from netresponse.serialization import JsonSerializer

logger = logging.getLogger(__name__)

_NULL_BODY = "null"


class ResponseCache:
    """Typed, best-effort view over a :class:`~netresponse.cache.store.CacheStore`.

    Args:
        store: The persistent store.  Ownership stays with the caller;
            :meth:`close` closes it.
        serializer: Body/header codec.  Defaults to :class:`JsonSerializer`.
        clock: Returns the current time in seconds since the epoch.
        mark_hits: When ``True``, every entry served by :meth:`read`
            carries an ``X-From-Cache: true`` header.

    Example::

        from netresponse.cache import DiskCacheStore, ResponseCache

        cache = ResponseCache(DiskCacheStore("/tmp/api-cache"))
        cache.write("GET_ab12", Success(body=[1, 2, 3]), max_age_seconds=60)
        hit = cache.read("GET_ab12", list[int], CacheConfig())
    """

    def __init__(
        self,
        store: CacheStore,
        serializer: Optional[JsonSerializer] = None,
        clock: Callable[[], float] = time.time,
        mark_hits: bool = False,
    ) -> None:
        self._store = store
        self._serializer = serializer or JsonSerializer()
        self._clock = clock
        self._mark_hits = mark_hits

    def now_ms(self) -> int:
        return int(self._clock() * 1000)

    def read(self, key: str, body_type: Any, config: CacheConfig) -> Optional[Success[Any]]:
        """Return the cached response for *key* if present, valid and decodable."""
        try:
            entry = self._store.get(key)
            if entry is None:
                logger.debug("Cache miss: %s", key)
                return None
            if not self.is_valid(entry, config):
                logger.debug("Cache entry %s is stale for %s", key, config.strategy.value)
                return None
            # Empty 2xx bodies are stored as JSON null whatever the body type.
            body = (
                None
                if entry.serialized_body == _NULL_BODY
                else self._serializer.deserialize(entry.serialized_body, body_type)
            )
            headers: Optional[Headers] = None
            if entry.serialized_headers is not None:
                headers = self._serializer.deserialize(entry.serialized_headers, Headers)
        except Exception as exc:
            logger.warning("Ignoring unreadable cache entry %s: %s", key, exc)
            return None

        logger.debug("Cache hit: %s", key)
        hit: Success[Any] = Success(body=body, headers=headers, code=entry.code)
        return mark_as_from_cache(hit) if self._mark_hits else hit

    def write(self, key: str, response: Success[Any], max_age_seconds: int) -> None:
        """Store *response* under *key*, replacing any previous entry."""
        try:
            entry = CacheEntry(
                key=key,
                serialized_body=self._serializer.serialize(response.body),
                serialized_headers=(
                    self._serializer.serialize(response.headers)
                    if response.headers is not None
                    else None
                ),
                code=response.code,
                stored_at=self.now_ms(),
                max_age_seconds=max_age_seconds,
            )
            self._store.upsert(entry)
        except Exception as exc:
            logger.warning("Failed to cache response for %s: %s", key, exc)

    def is_valid(self, entry: CacheEntry, config: CacheConfig, now_ms: Optional[int] = None) -> bool:
        """Apply the freshness table for ``config.strategy`` to *entry*."""
        if now_ms is None:
            now_ms = self.now_ms()
        age = (now_ms - entry.stored_at) // 1000

        if config.strategy is CacheStrategy.CACHE_ONLY:
            return True
        if config.strategy is CacheStrategy.CACHE_FIRST:
            return age <= config.stale_while_revalidate_seconds
        return age <= config.max_age_seconds

    def invalidate(self, key: str) -> None:
        """Remove the entry stored under *key*, if any."""
        try:
            self._store.delete(key)
        except Exception as exc:
            logger.warning("Failed to invalidate cache entry %s: %s", key, exc)

    def clear(self) -> None:
        """Remove all entries."""
        try:
            self._store.delete_all()
        except Exception as exc:
            logger.warning("Failed to clear cache: %s", exc)

    def sweep_expired(self, now_ms: Optional[int] = None) -> int:
        """Drop entries older than their own ``max_age_seconds``.

        Returns:
            The number of entries removed, or ``0`` if the sweep failed.
        """
        if now_ms is None:
            now_ms = self.now_ms()
        try:
            removed = self._store.delete_expired(now_ms)
        except Exception as exc:
            logger.warning("Failed to sweep expired cache entries: %s", exc)
            return 0
        logger.debug("Swept %d expired cache entries", removed)
        return removed

    def stats(self) -> dict[str, Any]:
        """Return ``size`` and, for disk stores, ``directory``."""
        result: dict[str, Any] = {"size": len(self._store)}
        directory = getattr(self._store, "directory", None)
        if directory is not None:
            result["directory"] = str(directory)
        return result

    def close(self) -> None:
        self._store.close()
