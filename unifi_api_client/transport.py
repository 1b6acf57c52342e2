"""
Single-request HTTP transport for the controller client.
"""

from dataclasses import dataclass, field
from http.cookiejar import DefaultCookiePolicy
from typing import Dict, List, Optional, Union

import requests
import urllib3

from .exceptions import UnifiConnectionError
from .logging import get_logger

logger = get_logger(__name__)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


@dataclass
class TransportResponse:
    """Status, headers and body of one HTTP exchange."""

    status_code: int
    text: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    set_cookies: List[str] = field(default_factory=list)


class Transport:
    """
    Sends one HTTP request per call through a shared ``requests.Session``.

    The session's cookie jar rejects every cookie: the client replays its
    session cookie explicitly through the ``Cookie`` header, so the jar must
    not add a second copy.

    Args:
        verify_ssl: True/False, or a path to a CA bundle or directory.
        connect_timeout: Seconds allowed to establish a connection.
        request_timeout: Seconds allowed to wait for the response.
    """

    def __init__(
        self,
        verify_ssl: Union[bool, str] = True,
        connect_timeout: float = 10,
        request_timeout: float = 30,
    ):
        self.verify_ssl = verify_ssl
        self.connect_timeout = connect_timeout
        self.request_timeout = request_timeout
        self.session = requests.Session()
        self.session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
        self.session.headers.update(DEFAULT_HEADERS)

        if not verify_ssl:
            logger.warning(
                "SSL certificate verification is disabled. This is not recommended for production use."
            )
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> TransportResponse:
        """
        Issue a single HTTP request.

        Args:
            method: HTTP verb.
            url: Absolute URL.
            headers: Extra headers for this request only.
            body: Request body, already serialized.

        Returns:
            TransportResponse: The status code, headers, raw Set-Cookie lines and body text.

        Raises:
            UnifiConnectionError: If the request cannot be completed (connection
                                  refused, TLS failure, timeout, ...).
        """
        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                data=body.encode("utf-8") if body is not None else None,
                verify=self.verify_ssl,
                timeout=(self.connect_timeout, self.request_timeout),
                allow_redirects=False,
            )
        except requests.exceptions.RequestException as e:
            error_msg = f"API {method} request to {url} failed: {e}"
            logger.error(error_msg)
            raise UnifiConnectionError(error_msg) from e

        return TransportResponse(
            status_code=response.status_code,
            text=response.text,
            headers=dict(response.headers),
            set_cookies=_set_cookie_lines(response),
        )

    def close(self) -> None:
        self.session.close()


def _set_cookie_lines(response: requests.Response) -> List[str]:
    """Return every Set-Cookie header line, unmerged."""
    raw_headers = getattr(response.raw, "headers", None)
    if raw_headers is not None and hasattr(raw_headers, "getlist"):
        return list(raw_headers.getlist("Set-Cookie"))

    merged = response.headers.get("Set-Cookie")
    return [merged] if merged else []
