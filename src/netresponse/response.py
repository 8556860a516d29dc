"""Outcome variants produced by every network call.

A call never "throws a 500": it returns one of four frozen dataclasses.

* :class:`Success` -- a 2xx response whose body was decoded.
* :class:`ServerError` -- a 4xx/5xx response; ``body`` is ``None`` when the
  error payload could not be decoded.
* :class:`NetworkError` -- no response was obtained at all.
* :class:`UnknownError` -- anything else, e.g. a 2xx body that failed to
  decode.  Status code and headers are kept when they were known.

The three error variants share the :class:`ErrorResponse` marker base so
callers can match exhaustively or just ask :func:`is_error`::

    match outcome:
        case Success(body=users):
            ...
        case ServerError(code=404):
            ...
        case ErrorResponse():
            ...
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")

Headers = dict[str, list[str]]

FROM_CACHE_HEADER = "X-From-Cache"


class ErrorResponse:
    """Marker base shared by :class:`ServerError`, :class:`NetworkError` and :class:`UnknownError`."""

    __slots__ = ()


@dataclass(frozen=True)
class Success(Generic[T]):
    body: T
    headers: Optional[Headers] = None
    code: int = 200


@dataclass(frozen=True)
class ServerError(ErrorResponse, Generic[E]):
    body: Optional[E]
    code: int
    headers: Optional[Headers] = None


@dataclass(frozen=True)
class NetworkError(ErrorResponse):
    error: BaseException


@dataclass(frozen=True)
class UnknownError(ErrorResponse):
    error: BaseException
    code: Optional[int] = None
    headers: Optional[Headers] = None


NetworkResponse = Union[Success[T], ServerError[E], NetworkError, UnknownError]


def is_error(outcome: Any) -> bool:
    """Return ``True`` for any of the three error variants."""
    return isinstance(outcome, ErrorResponse)


def body_or_none(outcome: Any) -> Any:
    """Return the success body, or ``None`` for every error variant.

    Example::

        users = body_or_none(await client.get("/users", list[User]))
        print(users or "No users found")
    """
    if isinstance(outcome, Success):
        return outcome.body
    return None


def mark_as_from_cache(outcome: Success[T]) -> Success[T]:
    """Return a copy of *outcome* carrying an ``X-From-Cache: true`` header."""
    headers: Headers = {name: list(values) for name, values in (outcome.headers or {}).items()}
    headers.setdefault(FROM_CACHE_HEADER, []).append("true")
    return dataclasses.replace(outcome, headers=headers)


def is_from_cache(outcome: Any) -> bool:
    """Whether *outcome* is a ``Success`` served from the cache."""
    if not isinstance(outcome, Success) or not outcome.headers:
        return False
    return "true" in outcome.headers.get(FROM_CACHE_HEADER, [])
