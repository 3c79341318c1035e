"""Wake and list operations wired to interface resolution and configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from lanwake.config import Settings
from lanwake.errors import InvalidHardwareAddress
from lanwake.services.discovery import HostDiscoverer
from lanwake.utils.interfaces import resolve_default_address, resolve_local_address, subnet_base
from lanwake.utils.wol import WakeTarget, format_mac, wake

logger = logging.getLogger(__name__)


@dataclass
class WakeResult:
    mac_address: str
    target: WakeTarget
    bytes_sent: int
    dry_run: bool = False


class LanService:
    """Resolves the configured interface, then wakes or scans through it."""

    def __init__(self, settings: Settings, discoverer: HostDiscoverer | None = None):
        self._settings = settings
        self._discoverer = discoverer or HostDiscoverer(settings.nmap_path)

    def wake_target(self, broadcast_ip: str | None = None, port: int | None = None) -> WakeTarget:
        local_address = None
        if self._settings.interface:
            local_address = resolve_local_address(self._settings.interface)
        return WakeTarget(
            broadcast_ip=broadcast_ip or self._settings.broadcast_ip,
            port=self._settings.udp_port if port is None else port,
            local_address=local_address,
        )

    def wake(
        self,
        mac_address: str | None = None,
        broadcast_ip: str | None = None,
        port: int | None = None,
    ) -> WakeResult:
        """Send a magic packet; MAC defaults to the configured one."""
        mac = mac_address or self._settings.mac_address
        if not mac:
            raise InvalidHardwareAddress("No MAC address given or configured")
        mac = format_mac(mac)
        target = self.wake_target(broadcast_ip, port)

        if self._settings.is_dev_mode:
            logger.info("[DEV] WoL packet (not sent): %s -> %s:%s", mac, target.broadcast_ip, target.port)
            return WakeResult(mac_address=mac, target=target, bytes_sent=0, dry_run=True)

        sent = wake(mac, target)
        return WakeResult(mac_address=mac, target=target, bytes_sent=sent)

    def scan_subnet(self) -> str:
        """Subnet base of the configured interface (or the first usable one)."""
        if self._settings.interface:
            address = resolve_local_address(self._settings.interface)
        else:
            address = resolve_default_address()
        return subnet_base(address)

    def list_hosts(self, only_up: bool | None = None) -> tuple[str, list[str]]:
        """Scan the local /24 and return ``(subnet, addresses)``."""
        if only_up is None:
            only_up = self._settings.scan_only_up
        subnet = self.scan_subnet()
        addresses = self._discoverer.discover(subnet, only_up=only_up)
        logger.info("Found %d host(s) on %s/24", len(addresses), subnet)
        return subnet, addresses
