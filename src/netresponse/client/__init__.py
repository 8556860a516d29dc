"""HTTP client module for netresponse.

Provides :class:`AsyncClient`, a non-blocking client backed by
:class:`httpx.AsyncClient` that returns
:data:`~netresponse.response.NetworkResponse` outcomes and applies the
cache and retry policies per call, plus the helpers that classify raw
responses and exceptions.

Example::

    from netresponse.client import AsyncClient

    async with AsyncClient("https://api.example.com") as client:
        outcome = await client.get("/users", list[User])
"""

from netresponse.client.async_client import AsyncClient
from netresponse.client.handler import handle_response, outcome_from_exception

__all__ = ["AsyncClient", "handle_response", "outcome_from_exception"]
