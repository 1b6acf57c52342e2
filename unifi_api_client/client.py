import json
from typing import Any, Dict, Optional, Union

from .auth import Authenticator
from .config import (
    DEFAULT_BASE_URL,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SESSION_KEY,
    DEFAULT_SITE,
    DEFAULT_VERSION,
    ConnectionConfig,
    check_site,
    check_timeout,
)
from .decoder import decode_response
from .detector import ControllerVariant
from .endpoints import EndpointsMixin
from .exceptions import UnifiConnectionError
from .logging import get_logger, log_api_response
from .result import ErrorKind, Result
from .session import Session, SessionStore
from .transport import Transport, TransportResponse

logger = get_logger(__name__)

CLASS_VERSION = "0.1.0"
ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")

DEVICE_STATES = {
    0: "offline",
    1: "connected",
    2: "pending adoption",
    4: "updating",
    5: "provisioning",
    6: "unreachable",
    7: "adopting",
    9: "adoption error",
    10: "adoption failed",
    11: "isolated",
}


class UnifiClient(EndpointsMixin):
    """
    Client for the UniFi Network controller API.

    Handles login against legacy controllers and UniFi OS consoles, replays the
    session cookie, adds the CSRF header UniFi OS requires, and re-authenticates
    once when the session has expired. Every call returns a
    :class:`~unifi_api_client.result.Result` instead of raising for expected
    failures.

    Note:
        This client interacts with the UniFi Controller's **undocumented** private API.
        Response structures and endpoint behavior may change without notice between
        controller versions.

    Example:
        >>> with UnifiClient("admin", "secret", "https://10.0.0.1:8443") as client:
        ...     if client.login():
        ...         sites = client.list_sites().data
    """

    def __init__(
        self,
        username: str,
        password: str,
        base_url: str = DEFAULT_BASE_URL,
        site: str = DEFAULT_SITE,
        version: str = DEFAULT_VERSION,
        verify_ssl: Union[bool, str] = True,
        session_key: str = DEFAULT_SESSION_KEY,
        session_store: Optional[SessionStore] = None,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        debug: bool = False,
        transport: Optional[Transport] = None,
    ):
        """
        Initialize the client. No request is made until :meth:`login`.

        Args:
            username: Username of a local controller account (not a cloud account).
            password: Password for authentication.
            base_url: Base URL of the controller including ``https://``. Legacy
                      controllers need the port (e.g. ``:8443``). No trailing slash.
            site: Short name of the site to work with. Defaults to 'default'.
            version: Controller version, informational only.
            verify_ssl: Whether to verify SSL certificates. Can be:
                       - True: Verify SSL certificates (default, recommended)
                       - False: Disable verification (insecure, not recommended)
                       - str: Path to a CA bundle file or directory with certificates of trusted CAs
            session_key: Key under which ``session_store`` keeps the session cookie.
            session_store: Optional store shared between client instances so that
                           later instances can skip the login request.
            connect_timeout: Seconds allowed to establish a connection.
            request_timeout: Seconds allowed to receive a response.
            debug: Reject site names containing whitespace and log request payloads.
            transport: Optional transport to use instead of a new :class:`Transport`.

        Raises:
            InvalidBaseUrlError: If ``base_url`` is incomplete, invalid or ends with '/'.
            InvalidSiteNameError: If ``debug`` is set and ``site`` contains whitespace.
            ValueError: If a timeout is not a positive number.
        """
        self.config = ConnectionConfig(
            base_url=base_url,
            username=username,
            password=password,
            site=site,
            version=version,
            verify_ssl=verify_ssl,
            connect_timeout=connect_timeout,
            request_timeout=request_timeout,
            debug=debug,
            session_key=session_key,
        )
        logger.debug(f"Initializing UnifiClient with URL: {self.config.base_url}")

        self.transport = transport or Transport(
            verify_ssl=verify_ssl,
            connect_timeout=connect_timeout,
            request_timeout=request_timeout,
        )
        self.session = Session()
        self.session_store = session_store
        self._auth = Authenticator(self.config, self.transport, self.session, session_store)
        self._last_results_raw: Any = None
        self._last_error_message = ""

    def __enter__(self) -> "UnifiClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self) -> None:
        """
        Release the client.

        Logs out first, unless a session store keeps the session for other instances.
        """
        if self.session.is_logged_in and self.session_store is None:
            self.logout()
        self.transport.close()

    # --- Authentication ---

    def login(self) -> Result:
        """
        Log in to the controller.

        Returns:
            Result: Success; ``LOGIN_FAILED`` with ``status_code`` set when the
            controller rejected the credentials; ``CONNECTION_ERROR`` when the
            controller could not be reached.
        """
        result = self._auth.login()
        self._last_error_message = result.message
        return result

    def logout(self) -> Result:
        """Log out. Local session state is cleared even when the request fails."""
        result = self._auth.logout()
        self._last_error_message = result.message
        return result

    @property
    def is_logged_in(self) -> bool:
        return self.session.is_logged_in

    # --- Request execution ---

    def execute(
        self,
        path: str,
        method: str = "GET",
        payload: Optional[Any] = None,
        login_required: bool = True,
    ) -> Result:
        """
        Send a request to the controller API and decode the answer.

        Args:
            path: API path starting with '/', relative to the Network application
                  (e.g. ``/api/s/default/stat/health``).
            method: HTTP verb, one of GET, POST, PUT, DELETE or PATCH. GET and
                    DELETE requests carrying a payload are sent as POST.
            payload: Optional JSON-serializable payload.
            login_required: Fail with ``LOGIN_REQUIRED`` instead of sending the
                            request when no session exists.

        Returns:
            Result: On success, ``data`` is the ``data`` list of the response (or
            True when the response carries none, or the whole body for
            ``/v2/api/`` paths).
        """
        return self._fetch_results(path, method, payload, False, login_required)

    def execute_boolean(
        self,
        path: str,
        method: str = "GET",
        payload: Optional[Any] = None,
        login_required: bool = True,
    ) -> Result:
        """Same as :meth:`execute`, but a successful result carries ``True`` as data."""
        return self._fetch_results(path, method, payload, True, login_required)

    def custom_api_request(
        self,
        path: str,
        method: str = "GET",
        payload: Optional[Any] = None,
        return_type: str = "array",
    ) -> Result:
        """
        Send a request to an arbitrary API path.

        Args:
            path: API path, must start with '/'.
            method: HTTP verb.
            payload: Optional JSON-serializable payload.
            return_type: 'array' to get the response data, 'boolean' to get True on success.

        Returns:
            Result: ``INVALID_REQUEST`` for an unknown ``return_type``.
        """
        if return_type == "array":
            return self.execute(path, method, payload)
        if return_type == "boolean":
            return self.execute_boolean(path, method, payload)
        return self._fail(
            Result.failure(ErrorKind.INVALID_REQUEST, f"Unsupported return type: {return_type}")
        )

    def _fetch_results(
        self,
        path: str,
        method: str,
        payload: Optional[Any],
        boolean: bool,
        login_required: bool,
    ) -> Result:
        method = method.upper()
        if method not in ALLOWED_METHODS:
            return self._fail(
                Result.failure(ErrorKind.INVALID_REQUEST, f"Unsupported HTTP method: {method}")
            )
        if not path.startswith("/"):
            return self._fail(
                Result.failure(ErrorKind.INVALID_REQUEST, f"Path must start with '/': {path}")
            )

        if login_required and not self.session.is_logged_in:
            logger.debug(f"Not logged in, refusing request to {path}")
            return self._fail(
                Result.failure(ErrorKind.LOGIN_REQUIRED, "Login required before calling the API")
            )

        outcome = self._exec_request(path, method, payload)
        if isinstance(outcome, Result):
            return self._fail(outcome)

        result, raw = decode_response(path, outcome.text, boolean=boolean)
        self._last_results_raw = raw
        self._last_error_message = result.message
        if not result.ok and result.status_code is None:
            result = Result.failure(result.error, result.message, outcome.status_code)
        return result

    def _exec_request(
        self, path: str, method: str, payload: Optional[Any], retries: int = 0
    ) -> Union[TransportResponse, Result]:
        """
        Send one request, re-authenticating and retrying once on HTTP 401.

        Returns:
            The transport response, or a failed Result for connection errors and
            sessions that could not be renewed.
        """
        url = f"{self.config.base_url}{self.variant.api_prefix}{path}"

        wire_method = method
        body = None
        if payload:
            body = json.dumps(payload, separators=(",", ":"))
            # the controller does not accept bodies on GET and DELETE
            if method in ("GET", "DELETE"):
                wire_method = "POST"

        headers: Dict[str, str] = {}
        if self.session.cookies:
            headers["Cookie"] = self.session.cookies
        if self.session.is_unifi_os and wire_method != "GET":
            csrf_token = self.session.csrf_token
            if csrf_token:
                headers["x-csrf-token"] = csrf_token
            else:
                logger.warning(
                    "UniFi OS detected, but CSRF token not found in session cookie for non-GET request."
                )

        if self.config.debug and body is not None:
            logger.debug(f"{wire_method} {url} payload: {body}")

        try:
            response = self.transport.send(wire_method, url, headers=headers, body=body)
        except UnifiConnectionError as e:
            return Result.failure(ErrorKind.CONNECTION_ERROR, str(e))

        log_api_response(logger, url, response.text, response.status_code)

        if response.status_code != 401:
            self._auth.refresh(response.set_cookies)
            logger.debug(
                f"API {wire_method} request to {url} completed (Status: {response.status_code})"
            )
            return response

        if retries > 0:
            error_msg = "Request still failed with 401 after re-authentication."
            logger.error(error_msg)
            self._auth.invalidate()
            return Result.failure(ErrorKind.UNAUTHORIZED, error_msg, status_code=401)

        logger.warning(
            f"Received 401 Unauthorized from {url}. Attempting re-authentication..."
        )
        self._auth.invalidate()
        login_result = self._auth.login()
        if not login_result.ok:
            error_msg = f"Re-authentication failed: {login_result.message}"
            logger.error(error_msg)
            return Result.failure(
                ErrorKind.UNAUTHORIZED, error_msg, status_code=login_result.status_code or 401
            )

        logger.info("Re-authentication successful. Retrying original request.")
        return self._exec_request(path, method, payload, retries + 1)

    def _fail(self, result: Result) -> Result:
        self._last_error_message = result.message
        return result

    # --- Accessors ---

    @property
    def site(self) -> str:
        return self.config.site

    @property
    def variant(self) -> ControllerVariant:
        return ControllerVariant.from_flag(self.session.is_unifi_os)

    def set_site(self, site: str) -> str:
        """
        Switch to another site for subsequent calls.

        Args:
            site: Short site name the credentials have access to.

        Returns:
            The normalized site name.

        Raises:
            InvalidSiteNameError: If debug mode is on and the name contains whitespace.
        """
        self.config.site = check_site(site, strict=self.config.debug)
        return self.config.site

    def get_site(self) -> str:
        return self.config.site

    def set_debug(self, enable: bool) -> bool:
        self.config.debug = enable
        return True

    def get_debug(self) -> bool:
        return self.config.debug

    def get_last_results_raw(self, as_json: bool = False) -> Any:
        """
        Get the body of the last API response.

        Args:
            as_json: Return a pretty-printed JSON string instead of the decoded value.

        Returns:
            The decoded body, the unparsed text when it was not valid JSON, or None
            when no response has been received yet.
        """
        if self._last_results_raw is None:
            return None
        if as_json:
            return json.dumps(self._last_results_raw, indent=4)
        return self._last_results_raw

    def get_last_error_message(self) -> str:
        """Error message of the last call, empty when it succeeded."""
        return self._last_error_message

    def get_cookies(self) -> str:
        return self.session.cookies

    def set_cookies(self, cookies: str) -> None:
        """Use an existing session cookie, e.g. one kept by the caller."""
        self.session.adopt(cookies)

    def get_is_unifi_os(self) -> bool:
        return self.session.is_unifi_os

    def set_is_unifi_os(self, is_unifi_os: bool) -> bool:
        self.session.is_unifi_os = is_unifi_os
        self._auth.detected_variant = ControllerVariant.from_flag(is_unifi_os)
        return True

    def get_connection_timeout(self) -> float:
        return self.config.connect_timeout

    def set_connection_timeout(self, timeout: float) -> bool:
        self.config.connect_timeout = check_timeout(timeout, "connect_timeout")
        self.transport.connect_timeout = timeout
        return True

    def get_request_timeout(self) -> float:
        return self.config.request_timeout

    def set_request_timeout(self, timeout: float) -> bool:
        self.config.request_timeout = check_timeout(timeout, "request_timeout")
        self.transport.request_timeout = timeout
        return True

    def get_class_version(self) -> str:
        return CLASS_VERSION

    @staticmethod
    def list_device_states() -> Dict[int, str]:
        """Human-readable names of the numeric device ``state`` values."""
        return dict(DEVICE_STATES)
