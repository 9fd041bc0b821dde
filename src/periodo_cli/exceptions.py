"""Exception hierarchy for periodo-cli.

All exceptions inherit from :class:`PeriodoError`, which carries a
:class:`ErrorKind` tag and an ``exit_code``. Operations raise these
exceptions; the command layer converts them into
:class:`~periodo_cli.result.Err` values via
:func:`~periodo_cli.result.capture` and prints them.

Subclass hierarchy::

    PeriodoError          (RemoteError)
    +-- InvalidUsageError (UsageError)
    |   +-- BodyReadError (UsageError)
    +-- AuthError         (AuthExpired)
    |   +-- TokenExpiredError
    +-- RemoteError       (RemoteError)
    +-- ConnectionError_  (TransportError)
    +-- ConfigError       (UsageError)
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from periodo_cli.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE


class ErrorKind(str, enum.Enum):
    """Category of a failed operation."""

    USAGE = "UsageError"
    AUTH_EXPIRED = "AuthExpired"
    REMOTE = "RemoteError"
    TRANSPORT = "TransportError"


class PeriodoError(Exception):
    """Base exception for all periodo-cli errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    kind: ErrorKind = ErrorKind.REMOTE
    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(PeriodoError):
    """Raised for invalid CLI arguments or missing required parameters."""

    kind = ErrorKind.USAGE
    exit_code = EXIT_INVALID_USAGE


class BodyReadError(InvalidUsageError):
    """Raised when a request body file cannot be read."""


class ConfigError(PeriodoError):
    """Raised for invalid settings (bad environment values, unusable token file)."""

    kind = ErrorKind.USAGE
    exit_code = EXIT_INVALID_USAGE


class AuthError(PeriodoError):
    """Raised when no usable bearer token can be obtained."""

    kind = ErrorKind.AUTH_EXPIRED


class TokenExpiredError(AuthError):
    """Raised when the server answers 401 to an authenticated request.

    The message is fixed and points at the token location, whatever the
    response body said.
    """

    def __init__(self, token_location: str):
        super().__init__(f"Token has expired. Delete {token_location} and try again.")
        self.token_location = token_location


class RemoteError(PeriodoError):
    """Raised when the server answers with an unexpected status code.

    Args:
        message: Message extracted from the response body.
        status: The HTTP status code received.
        payload: The decoded error object (see
            :func:`~periodo_cli.client.response.extract_message`).
    """

    kind = ErrorKind.REMOTE

    def __init__(
        self,
        message: str,
        status: int = 0,
        payload: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.status = status
        self.payload = payload or {}


class ConnectionError_(PeriodoError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    kind = ErrorKind.TRANSPORT
