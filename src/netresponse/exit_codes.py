"""Numeric process exit codes for the ``netresponse`` command line.

Each constant maps to one outcome category so that shell scripts can tell
a server rejection from a dead network without parsing stderr.  The
mapping from a :data:`~netresponse.response.NetworkResponse` to one of
these codes lives in :func:`netresponse.client.response.exit_code_for`.

Example::

    $ netresponse fetch https://api.example.com/users --strategy cache_only
    $ echo $?
    6   # EXIT_NETWORK_ERROR -- nothing cached and network not allowed
"""

EXIT_SUCCESS = 0
"""The call produced a ``Success`` outcome."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (``UnknownError`` or a crash)."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_AUTH_FAILURE = 3
"""The server answered 401 or 403."""

EXIT_NOT_FOUND = 4
"""The server answered 404."""

EXIT_SERVER_ERROR = 5
"""The server answered with any other 4xx/5xx status."""

EXIT_NETWORK_ERROR = 6
"""No response was obtained (timeout, DNS failure, connection refused, empty cache)."""
