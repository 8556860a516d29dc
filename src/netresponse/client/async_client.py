"""Asynchronous HTTP client that returns outcomes instead of raising.

:class:`AsyncClient` wraps :class:`httpx.AsyncClient` and routes each call
through the policy engines:

- **Caching** -- when a :class:`~netresponse.cache.ResponseCache` and a
  :class:`~netresponse.models.CacheConfig` are supplied, the call runs
  under :func:`~netresponse.policy.execute_with_cache` with a key from
  :func:`~netresponse.cache.generate_cache_key`.
- **Retry** -- when a :class:`~netresponse.models.RetryConfig` is supplied,
  the network step runs under :func:`~netresponse.policy.execute_with_retry`.
- **Classification** -- responses become outcomes via
  :func:`~netresponse.client.handler.handle_response`; anything raised on
  the way out becomes an outcome via
  :func:`~netresponse.client.handler.outcome_from_exception`.

Example::

    async with AsyncClient("https://api.example.com", cache=cache) as client:
        outcome = await client.get(
            "/users", list[User],
            cache_config=CacheConfig(strategy=CacheStrategy.CACHE_FIRST),
            retry_config=RetryConfig(max_attempts=3),
        )
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional

import httpx

from netresponse.cache.cache import ResponseCache
from netresponse.cache.keys import generate_cache_key
from netresponse.client.handler import handle_response, outcome_from_exception
from netresponse.models import CacheConfig, RequestConfig, RetryConfig
from netresponse.policy import (
    execute_with_cache,
    execute_with_retry,
    execute_with_retry_and_cache,
)
from netresponse.policy.retry import Sleep
from netresponse.response import NetworkResponse
from netresponse.serialization import JsonSerializer

logger = logging.getLogger(__name__)


class AsyncClient:
    """Outcome-returning HTTP client.  Must be used as an async context manager.

    Args:
        base_url: Prefix for every request path.
        request: Timeout and TLS verification settings.
        cache: Cache adapter used when a call passes ``cache_config``.
        serializer: Body codec shared with the cache.
        transport: Optional :mod:`httpx` transport, e.g.
            :class:`httpx.MockTransport` in tests.
        sleep: Coroutine used for backoff waits.
    """

    def __init__(
        self,
        base_url: str = "",
        request: Optional[RequestConfig] = None,
        cache: Optional[ResponseCache] = None,
        serializer: Optional[JsonSerializer] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._base_url = base_url
        self._request_config = request or RequestConfig()
        self._cache = cache
        self._serializer = serializer or JsonSerializer()
        self._transport = transport
        self._sleep = sleep
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AsyncClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._request_config.timeout,
            verify=self._request_config.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    async def send(
        self,
        method: str,
        path: str,
        body_type: Any = Any,
        error_type: Any = Any,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        json_body: Optional[Any] = None,
    ) -> NetworkResponse[Any, Any]:
        """Perform exactly one request and classify the response.

        Raises:
            httpx.TransportError: When no response was obtained.
        """
        assert self._client is not None, "Client not initialised -- use as async context manager"

        merged_headers: dict[str, str] = {"Accept": "application/json"}
        merged_headers.update(headers or {})
        kwargs: dict[str, Any] = {
            "method": method,
            "url": path,
            "headers": merged_headers,
            "params": params,
        }
        if json_body is not None:
            kwargs["json"] = json_body

        response = await self._client.request(**kwargs)
        logger.debug("%s %s -> HTTP %d", method.upper(), response.request.url, response.status_code)
        return handle_response(response, body_type, error_type, self._serializer)

    async def request(
        self,
        method: str,
        path: str,
        body_type: Any = Any,
        error_type: Any = Any,
        *,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        json_body: Optional[Any] = None,
        cache_config: Optional[CacheConfig] = None,
        retry_config: Optional[RetryConfig] = None,
    ) -> NetworkResponse[Any, Any]:
        """Make a call under the requested cache and retry policies.

        Caching applies only when both this client has a cache and
        *cache_config* is given.  Never raises except on cancellation.
        """

        async def operation() -> NetworkResponse[Any, Any]:
            return await self.send(
                method, path, body_type, error_type,
                params=params, headers=headers, json_body=json_body,
            )

        try:
            if self._cache is not None and cache_config is not None:
                key = self.cache_key(method, path, params, json_body)
                if retry_config is not None:
                    return await execute_with_retry_and_cache(
                        self._cache, key, body_type, operation,
                        cache_config, retry_config, sleep=self._sleep,
                    )
                return await execute_with_cache(
                    self._cache, key, body_type, cache_config, operation,
                )
            if retry_config is not None:
                return await execute_with_retry(operation, retry_config, sleep=self._sleep)
            return await operation()
        except Exception as exc:
            return outcome_from_exception(exc)

    def cache_key(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json_body: Optional[Any] = None,
    ) -> str:
        """Return the cache key :meth:`request` uses for these arguments."""
        url = httpx.URL(self._base_url + path) if self._base_url else httpx.URL(path)
        if params:
            url = url.copy_merge_params(params)
        body = json.dumps(json_body, sort_keys=True) if json_body is not None else None
        return generate_cache_key(str(url), method, body)

    async def get(self, path: str, body_type: Any = Any, **kwargs: Any) -> NetworkResponse[Any, Any]:
        """Send a GET request; keyword arguments go to :meth:`request`."""
        return await self.request("GET", path, body_type, **kwargs)

    async def post(self, path: str, body_type: Any = Any, **kwargs: Any) -> NetworkResponse[Any, Any]:
        """Send a POST request; keyword arguments go to :meth:`request`."""
        return await self.request("POST", path, body_type, **kwargs)

    async def put(self, path: str, body_type: Any = Any, **kwargs: Any) -> NetworkResponse[Any, Any]:
        return await self.request("PUT", path, body_type, **kwargs)

    async def patch(self, path: str, body_type: Any = Any, **kwargs: Any) -> NetworkResponse[Any, Any]:
        return await self.request("PATCH", path, body_type, **kwargs)

    async def delete(self, path: str, body_type: Any = Any, **kwargs: Any) -> NetworkResponse[Any, Any]:
        return await self.request("DELETE", path, body_type, **kwargs)
