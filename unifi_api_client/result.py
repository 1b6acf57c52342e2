"""
Uniform outcome type returned by the session and request layer.

Expected failures (bad credentials, expired sessions, error envelopes,
undecodable bodies, unreachable controllers) are reported as a failed
:class:`Result` instead of an exception. Callers branch on ``result.ok`` or
``result.error``, or call :meth:`Result.raise_for_error` to get the matching
exception from :mod:`unifi_api_client.exceptions`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .exceptions import (
    UnifiAPIError,
    UnifiAuthenticationError,
    UnifiConfigurationError,
    UnifiConnectionError,
    UnifiControllerError,
    UnifiDataError,
    UnifiLoginFailedError,
    UnifiLoginRequiredError,
)


class ErrorKind(str, Enum):
    """Category of a failed :class:`Result`."""

    CONNECTION_ERROR = "connection_error"
    LOGIN_REQUIRED = "login_required"
    LOGIN_FAILED = "login_failed"
    UNAUTHORIZED = "unauthorized"
    DECODE_ERROR = "decode_error"
    API_ERROR = "api_error"
    INVALID_REQUEST = "invalid_request"


_ERROR_CLASSES = {
    ErrorKind.CONNECTION_ERROR: UnifiConnectionError,
    ErrorKind.LOGIN_REQUIRED: UnifiLoginRequiredError,
    ErrorKind.UNAUTHORIZED: UnifiAuthenticationError,
    ErrorKind.DECODE_ERROR: UnifiDataError,
    ErrorKind.API_ERROR: UnifiAPIError,
    ErrorKind.INVALID_REQUEST: UnifiConfigurationError,
}


@dataclass(frozen=True)
class Result:
    """
    Outcome of a login, logout or API call.

    Attributes:
        ok: True when the call succeeded.
        data: Success value. A list of objects for the primary API, ``True`` for
              boolean-style calls, or the whole decoded body for ``/v2/api/`` paths.
        error: The failure category, None on success.
        message: Error detail reported by the controller or the client, empty on success.
        status_code: HTTP status associated with the failure, when one is known.
    """

    ok: bool
    data: Any = None
    error: Optional[ErrorKind] = None
    message: str = ""
    status_code: Optional[int] = None

    @classmethod
    def success(cls, data: Any = True) -> "Result":
        return cls(ok=True, data=data)

    @classmethod
    def failure(
        cls, kind: ErrorKind, message: str = "", status_code: Optional[int] = None
    ) -> "Result":
        return cls(ok=False, error=kind, message=message, status_code=status_code)

    def __bool__(self) -> bool:
        return self.ok

    def raise_for_error(self) -> Any:
        """
        Return the success value, or raise the exception matching the failure.

        Raises:
            UnifiControllerError: A subclass chosen by :attr:`error`.
        """
        if self.ok:
            return self.data

        message = self.message or f"Request failed: {self.error.value}"
        if self.error is ErrorKind.LOGIN_FAILED:
            raise UnifiLoginFailedError(message, status_code=self.status_code)
        raise _ERROR_CLASSES.get(self.error, UnifiControllerError)(message)
