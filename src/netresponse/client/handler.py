"""Classification of raw HTTP results into outcome variants.

:func:`handle_response` maps an :class:`httpx.Response` that *was*
received; :func:`outcome_from_exception` maps a call that raised before a
usable outcome existed.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from netresponse.exceptions import TRANSPORT_ERRORS, UnexpectedStatusError
from netresponse.response import (
    Headers,
    NetworkError,
    NetworkResponse,
    ServerError,
    Success,
    UnknownError,
)
from netresponse.serialization import JsonSerializer


def headers_to_map(headers: httpx.Headers) -> Headers:
    """Group repeated header fields: ``{"set-cookie": ["a=1", "b=2"]}``."""
    return {name: headers.get_list(name) for name in headers.keys()}


def _decode(response: httpx.Response, type_: Any, serializer: JsonSerializer) -> Any:
    if not response.content:
        return None
    if type_ is str:
        return response.text
    return serializer.deserialize(response.content, type_)


def handle_response(
    response: httpx.Response,
    body_type: Any,
    error_type: Any = Any,
    serializer: Optional[JsonSerializer] = None,
) -> NetworkResponse[Any, Any]:
    """Turn a received response into an outcome.

    * 2xx: ``Success`` with the decoded body (``None`` when the body is
      empty).  A body that fails to decode becomes ``UnknownError`` with
      the status code and headers preserved.
    * 4xx/5xx: ``ServerError``; ``body`` is ``None`` when the error payload
      does not decode as *error_type*.
    * Anything else: ``UnknownError`` carrying :class:`UnexpectedStatusError`.

    ``body_type=str`` returns the raw text without JSON decoding.
    """
    serializer = serializer or JsonSerializer()
    code = response.status_code
    headers = headers_to_map(response.headers)

    if 200 <= code < 300:
        try:
            body = _decode(response, body_type, serializer)
        except Exception as exc:
            return UnknownError(exc, code=code, headers=headers)
        return Success(body=body, headers=headers, code=code)

    if 400 <= code < 600:
        try:
            error_body = _decode(response, error_type, serializer)
        except Exception:
            error_body = None
        return ServerError(body=error_body, code=code, headers=headers)

    return UnknownError(UnexpectedStatusError(code), code=code, headers=headers)


def outcome_from_exception(exc: BaseException) -> NetworkResponse[Any, Any]:
    """Map an exception that escaped a call to ``NetworkError`` or ``UnknownError``."""
    if isinstance(exc, TRANSPORT_ERRORS):
        return NetworkError(exc)
    return UnknownError(exc)
