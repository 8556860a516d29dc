"""Response caching for netresponse.

* :class:`ResponseCache` -- typed, best-effort reads and writes with
  per-strategy freshness evaluation.
* :class:`DiskCacheStore` -- the :mod:`diskcache`-backed persistent store,
  and :class:`CacheEntry`, the record it holds.
* :func:`generate_cache_key` -- deterministic keys from method, URL and body.
"""

from netresponse.cache.cache import ResponseCache
from netresponse.cache.keys import generate_cache_key
from netresponse.cache.store import CacheEntry, CacheStore, DiskCacheStore

__all__ = [
    "CacheEntry",
    "CacheStore",
    "DiskCacheStore",
    "ResponseCache",
    "generate_cache_key",
]
