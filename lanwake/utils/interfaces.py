"""Local network interface lookup via psutil."""

from __future__ import annotations

import ipaddress
import logging
from dataclasses import dataclass, field

import psutil

from lanwake.errors import InterfaceNotFound, NoAddressOnInterface, NoUsableAddress

logger = logging.getLogger(__name__)


@dataclass
class InterfaceInfo:
    name: str
    is_up: bool
    addresses: list[str] = field(default_factory=list)
    usable_address: str | None = None


def _parse_ip(address: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    """Parse a psutil address string; link-layer entries return None."""
    try:
        # IPv6 link-local entries carry a zone suffix ("fe80::1%eth0")
        return ipaddress.ip_address(address.split("%", 1)[0])
    except ValueError:
        return None


def _usable_ipv4(address: str) -> str | None:
    ip = _parse_ip(address)
    if ip is None or ip.is_loopback:
        return None
    if isinstance(ip, ipaddress.IPv6Address):
        ip = ip.ipv4_mapped
        if ip is None or ip.is_loopback:
            return None
    return str(ip)


def _first_usable(addrs) -> str | None:
    for addr in addrs:
        usable = _usable_ipv4(addr.address)
        if usable:
            return usable
    return None


def resolve_local_address(interface_name: str) -> str:
    """Return the first non-loopback IPv4 address of ``interface_name``."""
    all_addrs = psutil.net_if_addrs()
    if interface_name not in all_addrs:
        raise InterfaceNotFound(interface_name)

    # psutil also lists the link-layer entry; only IP entries count as addresses
    addrs = [a for a in all_addrs[interface_name] if _parse_ip(a.address) is not None]
    if not addrs:
        raise NoAddressOnInterface(interface_name)

    address = _first_usable(addrs)
    if address is None:
        raise NoUsableAddress(interface_name)

    logger.debug("Interface %s resolved to %s", interface_name, address)
    return address


def resolve_default_address() -> str:
    """First usable address across all interfaces, in psutil order."""
    for name, addrs in psutil.net_if_addrs().items():
        address = _first_usable(addrs)
        if address:
            logger.debug("No interface configured — using %s from %s", address, name)
            return address
    raise NoUsableAddress("")


def subnet_base(address: str, prefix: int = 24) -> str:
    """Network address of ``address/prefix``.

    Example: '192.168.1.42' -> '192.168.1.0'
    """
    net = ipaddress.ip_network(f"{address}/{prefix}", strict=False)
    return str(net.network_address)


def list_interfaces() -> list[InterfaceInfo]:
    """All interfaces with their IP addresses and the one we would use."""
    stats = psutil.net_if_stats()
    result: list[InterfaceInfo] = []
    for name, addrs in psutil.net_if_addrs().items():
        ips = [a.address for a in addrs if _parse_ip(a.address) is not None]
        result.append(
            InterfaceInfo(
                name=name,
                is_up=stats[name].isup if name in stats else False,
                addresses=ips,
                usable_address=_first_usable(addrs),
            )
        )
    return result
