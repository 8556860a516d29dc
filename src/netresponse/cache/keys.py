"""Cache key generation.

Keys have the shape ``METHOD_<url-hash>[_<body-hash>]``.  Hashes are
truncated SHA-256 digests, so distinct requests collide only with
negligible probability and identical requests always share a key.
"""

from __future__ import annotations

import hashlib
from typing import Optional

_DIGEST_LENGTH = 16


def _digest(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:_DIGEST_LENGTH]


def generate_cache_key(url: str, method: str = "GET", body: Optional[str] = None) -> str:
    """Build the cache key for a request.

    Args:
        url: The full request URL, including any query string.
        method: HTTP method; case-insensitive.
        body: Serialised request body, if the request has one.

    Returns:
        A deterministic key, e.g. ``"GET_3f1c0e9a7b2d4c51"``.
    """
    parts = [method.upper(), _digest(url)]
    if body is not None:
        parts.append(_digest(body))
    return "_".join(parts)
