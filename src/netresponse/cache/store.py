"""Persistent key-value store for cached responses.

:class:`CacheStore` is the narrow interface the cache adapter needs:
get-by-key, upsert, delete-by-key, delete-all and delete-expired.
:class:`DiskCacheStore` implements it on top of :mod:`diskcache`, which
serialises concurrent writers through SQLite so the last write for a key
wins.

Entries are stored as plain dicts (``CacheEntry.model_dump()``) and
validated again on the way out, so a record written by an incompatible
version surfaces as a validation error that the adapter treats as a miss.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol

import diskcache
from pydantic import BaseModel, Field


class CacheEntry(BaseModel):
    """One persisted response.

    Each write fully replaces the previous entry for the same ``key``.
    """

    key: str
    serialized_body: str = Field(description="JSON-encoded success body")
    serialized_headers: Optional[str] = Field(
        default=None, description="JSON-encoded ``dict[str, list[str]]``"
    )
    code: int
    stored_at: int = Field(description="Epoch milliseconds when the entry was written")
    max_age_seconds: int

    @property
    def expires_at(self) -> int:
        """Epoch milliseconds after which :meth:`CacheStore.delete_expired` drops the entry."""
        return self.stored_at + self.max_age_seconds * 1000


class CacheStore(Protocol):
    """Storage collaborator consumed by :class:`~netresponse.cache.ResponseCache`."""

    def get(self, key: str) -> Optional[CacheEntry]: ...

    def upsert(self, entry: CacheEntry) -> None: ...

    def delete(self, key: str) -> None: ...

    def delete_all(self) -> None: ...

    def delete_expired(self, now_ms: int) -> int: ...

    def __len__(self) -> int: ...

    def close(self) -> None: ...


class DiskCacheStore:
    """:class:`CacheStore` backed by a :class:`diskcache.Cache` directory.

    Args:
        directory: Root directory for the store.  A ``responses/``
            subdirectory is created inside it.

    Example::

        store = DiskCacheStore("/tmp/netresponse")
        store.upsert(CacheEntry(key="GET_ab12", serialized_body='"X"',
                                code=200, stored_at=0, max_age_seconds=300))
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory) / "responses"
        self._cache = diskcache.Cache(str(self._directory))

    @property
    def directory(self) -> Path:
        return self._directory

    def get(self, key: str) -> Optional[CacheEntry]:
        raw = self._cache.get(key)
        if raw is None:
            return None
        return CacheEntry.model_validate(raw)

    def upsert(self, entry: CacheEntry) -> None:
        self._cache.set(entry.key, entry.model_dump())

    def delete(self, key: str) -> None:
        self._cache.delete(key)

    def delete_all(self) -> None:
        self._cache.clear()

    def delete_expired(self, now_ms: int) -> int:
        """Remove every entry whose own ``max_age_seconds`` has elapsed.

        Returns:
            The number of entries removed.
        """
        removed = 0
        for key in list(self._cache):
            entry = self.get(key)
            if entry is None:
                continue
            if entry.expires_at < now_ms:
                if self._cache.delete(key):
                    removed += 1
        return removed

    def __len__(self) -> int:
        return len(self._cache)

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        self._cache.close()
