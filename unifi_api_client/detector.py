"""
Detection of the controller variant behind a base URL.

UniFi OS consoles (UDM, UDR, UCG, Cloud Key Gen2+, ...) answer ``/`` with
HTTP 200 and host the Network application under ``/proxy/network``. Legacy
software controllers redirect or refuse ``/`` and serve the API unprefixed.
"""

from enum import Enum

from .logging import get_logger
from .transport import Transport

logger = get_logger(__name__)


class ControllerVariant(Enum):
    LEGACY = "legacy"
    UNIFI_OS = "unifi_os"

    @property
    def login_path(self) -> str:
        return "/api/auth/login" if self is ControllerVariant.UNIFI_OS else "/api/login"

    @property
    def logout_path(self) -> str:
        return "/api/auth/logout" if self is ControllerVariant.UNIFI_OS else "/logout"

    @property
    def api_prefix(self) -> str:
        return "/proxy/network" if self is ControllerVariant.UNIFI_OS else ""

    @classmethod
    def from_flag(cls, is_unifi_os: bool) -> "ControllerVariant":
        return cls.UNIFI_OS if is_unifi_os else cls.LEGACY


def detect_variant(transport: Transport, base_url: str) -> ControllerVariant:
    """
    Probe ``base_url`` to tell a UniFi OS console from a legacy controller.

    Any 200 answer is taken as UniFi OS; the body is not inspected, so a
    reverse proxy that answers ``/`` with 200 is misclassified.

    Raises:
        UnifiConnectionError: If the probe cannot be sent.
    """
    response = transport.send("POST", f"{base_url}/")
    variant = ControllerVariant.from_flag(response.status_code == 200)
    logger.debug(
        f"Controller probe returned HTTP {response.status_code}, using {variant.value} paths"
    )
    return variant
