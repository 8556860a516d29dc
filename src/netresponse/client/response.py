"""Outcome formatting bridge -- maps outcomes to the output system.

After a call completes, :func:`format_outcome` writes a status line to
stderr and routes any body through
:meth:`~netresponse.output.OutputManager.format_response`.
:func:`exit_code_for` picks the process exit code for the command line.

See Also:
    :mod:`netresponse.output` -- the output manager that renders data.
"""

from __future__ import annotations

from typing import Any

from netresponse.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_NETWORK_ERROR,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
    EXIT_SUCCESS,
)
from netresponse.output import get_output
from netresponse.response import (
    NetworkError,
    ServerError,
    Success,
    UnknownError,
    is_from_cache,
)


def exit_code_for(outcome: Any) -> int:
    """Return the process exit code matching *outcome*'s variant and status."""
    if isinstance(outcome, Success):
        return EXIT_SUCCESS
    if isinstance(outcome, ServerError):
        if outcome.code in (401, 403):
            return EXIT_AUTH_FAILURE
        if outcome.code == 404:
            return EXIT_NOT_FOUND
        return EXIT_SERVER_ERROR
    if isinstance(outcome, NetworkError):
        return EXIT_NETWORK_ERROR
    return EXIT_GENERIC_FAILURE


def _content_type(headers: dict[str, list[str]] | None) -> str:
    for name, values in (headers or {}).items():
        if name.lower() == "content-type" and values:
            return values[0]
    return "application/json"


def format_outcome(outcome: Any) -> None:
    """Print *outcome* using the global output system.

    ``Success`` prints ``HTTP <code>`` (with ``(cached)`` for cache hits)
    to stderr and the body to stdout.  ``ServerError`` prints the status
    as an error and any decoded error body to stdout.  Network and unknown
    errors print their cause to stderr only.
    """
    output = get_output()

    if isinstance(outcome, Success):
        suffix = " (cached)" if is_from_cache(outcome) else ""
        output.info(f"HTTP {outcome.code}{suffix}")
        if outcome.body is not None:
            output.format_response(outcome.body, _content_type(outcome.headers))
    elif isinstance(outcome, ServerError):
        output.error(f"HTTP {outcome.code}")
        if outcome.body is not None:
            output.format_response(outcome.body, _content_type(outcome.headers))
    elif isinstance(outcome, NetworkError):
        output.error(f"Network error: {outcome.error}")
    elif isinstance(outcome, UnknownError):
        status = f" (HTTP {outcome.code})" if outcome.code is not None else ""
        output.error(f"Unexpected error{status}: {outcome.error}")
    else:
        output.error(f"Unrecognised outcome: {outcome!r}")
