"""
Connection settings for a UniFi controller client.
"""

import re
from dataclasses import dataclass
from typing import Union
from urllib.parse import urlparse

from .exceptions import InvalidBaseUrlError, InvalidSiteNameError
from .logging import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://127.0.0.1:8443"
DEFAULT_SITE = "default"
DEFAULT_VERSION = "8.0.28"
DEFAULT_CONNECT_TIMEOUT = 10
DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_SESSION_KEY = "unificookie"

_WHITESPACE = re.compile(r"\s")


def check_base_url(base_url: str) -> str:
    """
    Validate and normalize the controller base URL.

    Args:
        base_url: URL including the scheme and, for legacy controllers, the port
                  (e.g. ``https://10.0.0.1:8443``). Must not end with ``/``.

    Returns:
        The URL with surrounding whitespace removed.

    Raises:
        InvalidBaseUrlError: If the URL is incomplete, invalid or ends with ``/``.
    """
    base_url = (base_url or "").strip()
    parsed = urlparse(base_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc or base_url.endswith("/"):
        raise InvalidBaseUrlError(
            f"The URL provided is incomplete, invalid or ends with a / character: {base_url!r}"
        )
    return base_url


def check_site(site: str, strict: bool = False) -> str:
    """
    Normalize a short site name.

    Surrounding whitespace is always stripped. Inner whitespace is tolerated
    (with a warning) unless ``strict`` is set, which is how debug mode
    validates site names.

    Raises:
        InvalidSiteNameError: If ``strict`` and the name contains whitespace.
    """
    site = site.strip()
    if _WHITESPACE.search(site):
        if strict:
            raise InvalidSiteNameError(
                f"The provided (short) site name may not contain any spaces: {site!r}"
            )
        logger.warning(f"Site name {site!r} contains whitespace")
    return site


@dataclass
class ConnectionConfig:
    """
    Settings for one controller connection.

    Only ``site`` is meant to change after construction; use
    ``UnifiClient.set_site()`` for that.

    Attributes:
        base_url: Base URL of the controller, no trailing slash.
        username: Local controller account name.
        password: Password for ``username``.
        site: Short name of the site used to build site-relative paths.
        version: Controller version, informational.
        verify_ssl: True/False, or a path to a CA bundle (requests semantics).
        connect_timeout: Seconds allowed to establish a connection.
        request_timeout: Seconds allowed to receive a response.
        debug: Enables strict site-name validation and verbose request logging.
        session_key: Key under which a session store keeps the session cookie.
    """

    base_url: str
    username: str
    password: str
    site: str = DEFAULT_SITE
    version: str = DEFAULT_VERSION
    verify_ssl: Union[bool, str] = True
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    debug: bool = False
    session_key: str = DEFAULT_SESSION_KEY

    def __post_init__(self):
        self.base_url = check_base_url(self.base_url)
        self.site = check_site(self.site, strict=self.debug).lower()
        self.username = self.username.strip()
        self.password = self.password.strip()
        self.version = self.version.strip()
        self.session_key = self.session_key.strip()
        check_timeout(self.connect_timeout, "connect_timeout")
        check_timeout(self.request_timeout, "request_timeout")


def check_timeout(value: float, name: str) -> float:
    if value is None or value <= 0:
        raise ValueError(f"{name} must be a positive number of seconds")
    return value
