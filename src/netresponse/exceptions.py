"""Exception hierarchy for netresponse.

Outcomes of network calls are *values* (see :mod:`netresponse.response`),
so exceptions here are reserved for two jobs: configuration and usage
problems raised by the command line, and the ``cause`` objects carried
inside error outcomes.

Subclass hierarchy::

    NetResponseError (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- ConfigError            (exit 1)
    +-- NoCachedDataError      (exit 6)
    +-- UnexpectedStatusError  (exit 1)

:data:`TRANSPORT_ERRORS` is the single definition of what counts as a
transport-level failure.  The policy engines catch exactly these when
deciding whether to fall back to the cache or to retry.
"""

from __future__ import annotations

import asyncio

import httpx

from netresponse.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NETWORK_ERROR,
)


TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    httpx.TransportError,
    asyncio.TimeoutError,
    OSError,
)
"""Exceptions that mean "no response was obtained"."""


class NetResponseError(Exception):
    """Base exception for all netresponse errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(NetResponseError):
    """Raised for invalid CLI arguments (bad JSON body, unknown config key)."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(NetResponseError):
    """Raised when a config file exists but cannot be parsed or validated."""

    exit_code = EXIT_GENERIC_FAILURE


class NoCachedDataError(NetResponseError):
    """Cause of the ``NetworkError`` returned by ``CACHE_ONLY`` on a miss.

    The message is always ``"No cached data available"`` so callers can
    tell this sentinel apart from a genuine transport failure.
    """

    exit_code = EXIT_NETWORK_ERROR

    def __init__(self, message: str = "No cached data available") -> None:
        super().__init__(message)


class UnexpectedStatusError(NetResponseError):
    """Cause of the ``UnknownError`` produced for non-2xx/4xx/5xx statuses."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Unexpected HTTP status {status_code}")
        self.status_code = status_code
