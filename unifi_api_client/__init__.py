"""
UniFi controller API client.

This package provides a Python interface to the UniFi Network controller API
for both legacy controllers and UniFi OS consoles, handling login, session
reuse, CSRF tokens and transparent re-authentication.
"""

from .client import CLASS_VERSION, UnifiClient
from .config import ConnectionConfig
from .detector import ControllerVariant, detect_variant
from .result import ErrorKind, Result
from .session import MemorySessionStore, Session, SessionStore, extract_csrf_token
from .transport import Transport, TransportResponse
from .exceptions import (
    UnifiControllerError,
    UnifiConnectionError,
    UnifiAuthenticationError,
    UnifiLoginRequiredError,
    UnifiLoginFailedError,
    UnifiAPIError,
    UnifiDataError,
    UnifiConfigurationError,
    InvalidBaseUrlError,
    InvalidSiteNameError,
    MacAddressError,
)

__version__ = CLASS_VERSION

__all__ = [
    "UnifiClient",
    "ConnectionConfig",
    "ControllerVariant",
    "detect_variant",
    "ErrorKind",
    "Result",
    "MemorySessionStore",
    "Session",
    "SessionStore",
    "extract_csrf_token",
    "Transport",
    "TransportResponse",
    "UnifiControllerError",
    "UnifiConnectionError",
    "UnifiAuthenticationError",
    "UnifiLoginRequiredError",
    "UnifiLoginFailedError",
    "UnifiAPIError",
    "UnifiDataError",
    "UnifiConfigurationError",
    "InvalidBaseUrlError",
    "InvalidSiteNameError",
    "MacAddressError",
]
