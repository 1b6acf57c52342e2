"""
Login and logout against a UniFi controller.
"""

import json
from typing import Iterable, Optional, Tuple

from .config import ConnectionConfig
from .detector import ControllerVariant, detect_variant
from .exceptions import UnifiConnectionError
from .logging import get_logger
from .result import ErrorKind, Result
from .session import (
    LEGACY_COOKIE_MARKER,
    UNIFI_OS_COOKIE_MARKER,
    Session,
    SessionStore,
    extract_csrf_token,
)
from .transport import Transport

logger = get_logger(__name__)

LOGIN_HEADERS = {"Content-Type": "application/json; charset=utf-8"}


def parse_session_cookie(set_cookie_lines: Iterable[str]) -> Optional[Tuple[str, bool]]:
    """
    Find the controller session cookie among Set-Cookie header lines.

    Legacy controllers issue ``unifises=...``; UniFi OS consoles issue
    ``TOKEN=<jwt>``. Attributes such as ``Path`` or ``HttpOnly`` are dropped.

    Args:
        set_cookie_lines: Raw Set-Cookie header values.

    Returns:
        ``(cookie, is_unifi_os)`` for the last header carrying a session cookie,
        or None when no recognized cookie is present.
    """
    found = None
    for line in set_cookie_lines:
        for crumb in line.split(";"):
            crumb = crumb.strip()
            if LEGACY_COOKIE_MARKER in crumb:
                found = (crumb, False)
                break
            if UNIFI_OS_COOKIE_MARKER in crumb:
                found = (crumb, True)
                break
    return found


class Authenticator:
    """
    Performs the login handshake and logout for one client session.

    Args:
        config: Connection settings holding the credentials.
        transport: Transport used for the probe, login and logout requests.
        session: The client's session state, updated in place.
        store: Optional shared store used to reuse and persist the session cookie.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        transport: Transport,
        session: Session,
        store: Optional[SessionStore] = None,
    ):
        self.config = config
        self.transport = transport
        self.session = session
        self.store = store
        self.detected_variant: Optional[ControllerVariant] = None

    @property
    def variant(self) -> ControllerVariant:
        return ControllerVariant.from_flag(self.session.is_unifi_os)

    def login(self) -> Result:
        """
        Log in to the controller.

        Already being logged in, or finding a cookie in the session store,
        succeeds without any request; a stale stored cookie is caught by the
        401 handling of the next API call. The controller variant is probed on
        the first login only and reused when the session is renewed.

        Returns:
            Result: Success, ``LOGIN_FAILED`` (with the HTTP status when the
            controller refused the credentials) or ``CONNECTION_ERROR``.
        """
        if self.session.is_logged_in:
            return Result.success(True)

        if self._restore_from_store():
            return Result.success(True)

        base_url = self.config.base_url
        try:
            variant = self.detected_variant
            if variant is None:
                variant = detect_variant(self.transport, base_url)
                self.detected_variant = variant
            login_uri = f"{base_url}{variant.login_path}"
            logger.debug(f"Using {variant.value} authentication endpoint: {login_uri}")
            logger.debug(f"Attempting authentication with username: {self.config.username}")
            response = self.transport.send(
                "POST",
                login_uri,
                headers=dict(LOGIN_HEADERS, Referer=f"{base_url}/login"),
                body=json.dumps(
                    {"username": self.config.username, "password": self.config.password}
                ),
            )
        except UnifiConnectionError as e:
            error_msg = f"Authentication failed: {e}"
            logger.error(error_msg)
            return Result.failure(ErrorKind.CONNECTION_ERROR, error_msg)

        self.session.is_unifi_os = variant is ControllerVariant.UNIFI_OS

        if response.status_code >= 400:
            error_msg = (
                f"HTTP response status received: {response.status_code}. "
                "Probably a controller login failure"
            )
            logger.error(error_msg)
            return Result.failure(
                ErrorKind.LOGIN_FAILED, error_msg, status_code=response.status_code
            )

        parsed = parse_session_cookie(response.set_cookies)
        if response.status_code < 200 or not response.text or parsed is None:
            error_msg = "Login response did not contain a session cookie"
            logger.warning(error_msg)
            return Result.failure(
                ErrorKind.LOGIN_FAILED, error_msg, status_code=response.status_code
            )

        cookies, is_unifi_os = parsed
        self.session.adopt(cookies)
        self.session.is_unifi_os = is_unifi_os
        self.detected_variant = ControllerVariant.from_flag(is_unifi_os)
        self._save(cookies)

        logger.info("Successfully connected to Unifi controller.")
        return Result.success(True)

    def refresh(self, set_cookie_lines: Iterable[str]) -> bool:
        """
        Pick up a session cookie the controller rotated on an API response.

        Args:
            set_cookie_lines: Raw Set-Cookie header values of the response.

        Returns:
            bool: True when a new cookie replaced the current one.
        """
        if not self.session.is_logged_in:
            return False
        parsed = parse_session_cookie(set_cookie_lines)
        if parsed is None or parsed[0] == self.session.cookies:
            return False

        logger.debug("Controller issued a new session cookie")
        self.session.adopt(parsed[0])
        self._save(parsed[0])
        return True

    def logout(self) -> Result:
        """
        Log out from the controller.

        Local session state and the stored cookie are cleared whatever the
        controller answers.

        Returns:
            Result: Success, or ``CONNECTION_ERROR`` when the request could not be sent.
        """
        variant = self.variant
        headers = {}
        if self.session.cookies:
            headers["Cookie"] = self.session.cookies
        if variant is ControllerVariant.UNIFI_OS:
            csrf_token = extract_csrf_token(self.session.cookies)
            if csrf_token:
                headers["x-csrf-token"] = csrf_token

        logout_uri = f"{self.config.base_url}{variant.logout_path}"
        try:
            response = self.transport.send("POST", logout_uri, headers=headers, body="")
            logger.debug(f"Logout returned HTTP {response.status_code}")
            result = Result.success(True)
        except UnifiConnectionError as e:
            result = Result.failure(ErrorKind.CONNECTION_ERROR, str(e))
        finally:
            self.invalidate()

        return result

    def invalidate(self) -> None:
        """Forget the current session locally and in the session store."""
        self.session.clear()
        if self.store is not None:
            self.store.clear(self.config.session_key)

    def _save(self, cookies: str) -> None:
        if self.store is not None:
            self.store.save(self.config.session_key, cookies)

    def _restore_from_store(self) -> bool:
        if self.store is None:
            return False
        cookies = self.store.load(self.config.session_key)
        if not cookies:
            return False
        logger.debug(f"Reusing stored session '{self.config.session_key}'")
        self.session.adopt(cookies)
        return True
