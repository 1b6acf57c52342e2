"""
Representative UniFi Network endpoints built on ``UnifiClient.execute``.

Each method only shapes a payload and a site-relative path; authentication,
retries and envelope decoding are handled by the client. The controller API is
**undocumented** and responses may change between controller versions.
"""

import re
from typing import Any, Dict, List, Optional, Union

from .exceptions import MacAddressError
from .logging import get_logger
from .result import Result

logger = get_logger(__name__)

_MAC_PATTERN = re.compile(r"^[0-9a-f]{2}(:[0-9a-f]{2}){5}$")


def normalize_mac(mac_address: str) -> str:
    """
    Normalize a MAC address to lower-case, colon-separated format.

    Args:
        mac_address: MAC address string in any format (with or without separators).

    Returns:
        str: MAC address with colons between each pair of characters.

    Raises:
        MacAddressError: If the address is empty or not 12 hex digits.
    """
    if not mac_address or not mac_address.strip():
        raise MacAddressError("MAC address may not be empty")

    mac_clean = (
        mac_address.strip().replace(":", "").replace(
            "-", "").replace(".", "").lower()
    )
    mac = ":".join(mac_clean[i: i + 2] for i in range(0, len(mac_clean), 2))
    if not _MAC_PATTERN.match(mac):
        raise MacAddressError(f"Invalid MAC address: {mac_address!r}")
    return mac


class EndpointsMixin:
    """Endpoint wrappers mixed into ``UnifiClient``."""

    # --- Sites ---

    def list_sites(self) -> Result:
        """
        Fetch the sites the logged-in account has access to (`/api/self/sites`).

        Returns:
            Result: On success, ``data`` is a list of site objects.
        """
        return self.execute("/api/self/sites")

    def stat_sites(self) -> Result:
        """Fetch statistics for all sites hosted on this controller (`/api/stat/sites`)."""
        return self.execute("/api/stat/sites")

    def stat_sysinfo(self) -> Result:
        return self.execute(f"/api/s/{self.site}/stat/sysinfo")

    # --- Devices and clients ---

    def list_devices(self, macs: Optional[Union[str, List[str]]] = None) -> Result:
        """
        Fetch UniFi devices of the current site, optionally filtered by MAC.

        The filter is sent as a payload, so the request goes out as a POST.

        Args:
            macs: A MAC address or list of MAC addresses to filter by.

        Returns:
            Result: On success, ``data`` is a list of device objects.
        """
        mac_list = [macs] if isinstance(macs, str) else list(macs or [])
        payload = {"macs": [normalize_mac(m) for m in mac_list]}
        return self.execute(f"/api/s/{self.site}/stat/device", payload=payload)

    def list_clients(self, mac: Optional[str] = None) -> Result:
        """
        Fetch online client devices, or a single one when ``mac`` is given.

        Args:
            mac: Optional client MAC address.

        Returns:
            Result: On success, ``data`` is a list of client objects.
        """
        uri = f"/api/s/{self.site}/stat/sta"
        if mac is not None:
            uri += f"/{normalize_mac(mac)}"
        return self.execute(uri)

    # --- Guest authorization and blocking (`/cmd/stamgr`) ---

    def authorize_guest(
        self,
        mac: str,
        minutes: int,
        up_kbps: Optional[int] = None,
        down_kbps: Optional[int] = None,
        megabytes: Optional[int] = None,
        ap_mac: Optional[str] = None,
    ) -> Result:
        """
        Authorize a guest client for a number of minutes.

        Args:
            mac: Client MAC address to authorize.
            minutes: Duration in minutes until authorization expires.
            up_kbps: Optional upload speed limit in Kbps.
            down_kbps: Optional download speed limit in Kbps.
            megabytes: Optional data transfer limit in MB (sent as 'bytes').
            ap_mac: Optional MAC address of the AP the client is connected to.

        Returns:
            Result: ``data`` is True on success.
        """
        payload: Dict[str, Any] = {
            "cmd": "authorize-guest",
            "mac": normalize_mac(mac),
            "minutes": minutes,
        }
        if up_kbps:
            payload["up"] = up_kbps
        if down_kbps:
            payload["down"] = down_kbps
        if megabytes:
            payload["bytes"] = megabytes
        if ap_mac:
            payload["ap_mac"] = normalize_mac(ap_mac)

        logger.info(f"Authorizing guest {payload['mac']} on site {self.site}")
        return self._stamgr(payload)

    def unauthorize_guest(self, mac: str) -> Result:
        return self._stamgr({"cmd": "unauthorize-guest", "mac": normalize_mac(mac)})

    def block_sta(self, mac: str) -> Result:
        """Block a client device from associating with the current site."""
        logger.info(f"Blocking client {mac} on site {self.site}")
        return self._stamgr({"cmd": "block-sta", "mac": normalize_mac(mac)})

    def unblock_sta(self, mac: str) -> Result:
        logger.info(f"Unblocking client {mac} on site {self.site}")
        return self._stamgr({"cmd": "unblock-sta", "mac": normalize_mac(mac)})

    def _stamgr(self, payload: Dict[str, Any]) -> Result:
        return self.execute_boolean(f"/api/s/{self.site}/cmd/stamgr", payload=payload)

    # --- User groups (REST) ---

    def list_usergroups(self) -> Result:
        return self.execute(f"/api/s/{self.site}/list/usergroup")

    def create_usergroup(
        self, name: str, qos_rate_max_down_kbps: int = -1, qos_rate_max_up_kbps: int = -1
    ) -> Result:
        """
        Create a user group. Use -1 for unlimited bandwidth.

        Returns:
            Result: On success, ``data`` holds the new group with its ``_id``.
        """
        payload = {
            "name": name,
            "qos_rate_max_down": qos_rate_max_down_kbps,
            "qos_rate_max_up": qos_rate_max_up_kbps,
        }
        return self.execute(f"/api/s/{self.site}/rest/usergroup", "POST", payload)

    def edit_usergroup(
        self,
        group_id: str,
        site_id: str,
        name: str,
        qos_rate_max_down_kbps: int = -1,
        qos_rate_max_up_kbps: int = -1,
    ) -> Result:
        """
        Modify a user group with ``PUT /rest/usergroup/{group_id}``.

        Args:
            group_id: The `_id` of the user group.
            site_id: The `_id` of the site (not its short name).
            name: Name of the user group.
            qos_rate_max_down_kbps: Download limit in Kbps, -1 for unlimited.
            qos_rate_max_up_kbps: Upload limit in Kbps, -1 for unlimited.

        Returns:
            Result: On success, ``data`` holds the updated group.
        """
        group_id = group_id.strip()
        payload = {
            "_id": group_id,
            "name": name,
            "qos_rate_max_down": qos_rate_max_down_kbps,
            "qos_rate_max_up": qos_rate_max_up_kbps,
            "site_id": site_id,
        }
        return self.execute(f"/api/s/{self.site}/rest/usergroup/{group_id}", "PUT", payload)

    def delete_usergroup(self, group_id: str) -> Result:
        return self.execute_boolean(
            f"/api/s/{self.site}/rest/usergroup/{group_id.strip()}", "DELETE"
        )

    # --- v2 API ---

    def list_apgroups(self) -> Result:
        """
        Fetch AP groups from the v2 API.

        Returns:
            Result: On success, ``data`` is the decoded body (no ``meta`` envelope).
        """
        return self.execute(f"/v2/api/site/{self.site}/apgroups")

    def list_fingerprint_devices(self, fingerprint_source: int = 0) -> Result:
        return self.execute(f"/v2/api/fingerprint_devices/{fingerprint_source}")
