"""
Session state for one client instance and the optional external store that
lets short-lived client instances reuse a controller session.
"""

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from .logging import get_logger

logger = get_logger(__name__)

LEGACY_COOKIE_MARKER = "unifises"
UNIFI_OS_COOKIE_MARKER = "TOKEN"


def extract_csrf_token(cookies: str) -> Optional[str]:
    """
    Extract the CSRF token embedded in a UniFi OS session cookie.

    The cookie value is a JWT; its payload segment is base64url-encoded JSON
    holding a ``csrfToken`` field. Malformed or missing tokens yield None.

    Args:
        cookies: The session cookie, e.g. ``TOKEN=<header>.<payload>.<signature>``.

    Returns:
        The CSRF token, or None when it cannot be extracted.
    """
    if not cookies or UNIFI_OS_COOKIE_MARKER not in cookies:
        return None

    _, sep, token = cookies.partition("=")
    if not sep:
        return None

    parts = token.strip().split(".")
    if len(parts) < 2 or not parts[1]:
        logger.debug("Session token is not a JWT, no CSRF token available")
        return None

    try:
        payload_b64 = parts[1]
        payload_b64 += "=" * (-len(payload_b64) % 4)
        payload_json = base64.urlsafe_b64decode(payload_b64).decode("utf-8")
        payload_data = json.loads(payload_json)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Error decoding JWT payload from session token: {e}")
        return None

    if not isinstance(payload_data, dict):
        return None
    csrf_token = payload_data.get("csrfToken")
    if not csrf_token:
        logger.debug("CSRF token not found within JWT payload.")
        return None
    return str(csrf_token)


@dataclass
class Session:
    """
    Authentication state of a single client.

    Attributes:
        cookies: The session cookie (``name=value``) replayed as the Cookie header.
        is_logged_in: Whether the client currently holds a session.
        is_unifi_os: Whether the controller is a UniFi OS console.
    """

    cookies: str = ""
    is_logged_in: bool = False
    is_unifi_os: bool = False

    @property
    def csrf_token(self) -> Optional[str]:
        """CSRF token derived from the current cookie; recomputed on every access."""
        return extract_csrf_token(self.cookies)

    def adopt(self, cookies: str) -> None:
        """Take over a cookie obtained elsewhere (login response or session store)."""
        self.cookies = cookies
        self.is_logged_in = True
        if UNIFI_OS_COOKIE_MARKER in cookies:
            self.is_unifi_os = True

    def clear(self) -> None:
        self.cookies = ""
        self.is_logged_in = False


class SessionStore(Protocol):
    """Storage for session cookies shared across client instances."""

    def load(self, key: str) -> Optional[str]:
        ...

    def save(self, key: str, cookies: str) -> None:
        ...

    def clear(self, key: str) -> None:
        ...


class MemorySessionStore:
    """
    In-process :class:`SessionStore` keyed by session key.

    Pass the same instance to several ``UnifiClient`` objects to skip the login
    round trip for every instance after the first one.
    """

    def __init__(self):
        self._cookies: Dict[str, str] = {}

    def load(self, key: str) -> Optional[str]:
        return self._cookies.get(key) or None

    def save(self, key: str, cookies: str) -> None:
        logger.debug(f"Storing session cookie under key '{key}'")
        self._cookies[key] = cookies

    def clear(self, key: str) -> None:
        self._cookies.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return bool(self._cookies.get(key))
