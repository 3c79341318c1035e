"""Wake-on-LAN (WOL) implementation."""

from __future__ import annotations

import logging
import re
import socket
from dataclasses import dataclass

from lanwake.errors import AddressResolutionError, InvalidHardwareAddress, ShortWrite, SocketError

logger = logging.getLogger(__name__)

DEFAULT_BROADCAST = "255.255.255.255"
DEFAULT_PORT = 9
MAGIC_PACKET_SIZE = 102

_SEPARATORS = re.compile(r"[:\-.]")
_HEX12 = re.compile(r"[0-9a-fA-F]{12}")


@dataclass(frozen=True)
class WakeTarget:
    """Where a magic packet goes and which local address it leaves from."""

    broadcast_ip: str = DEFAULT_BROADCAST
    port: int = DEFAULT_PORT
    local_address: str | None = None


def parse_mac(mac_address: str) -> bytes:
    """Normalize a MAC address to its 6 raw bytes.

    Accepts "AA:BB:CC:DD:EE:FF", "AA-BB-CC-DD-EE-FF", "aabb.ccdd.eeff"
    and "AABBCCDDEEFF" in any case.
    """
    if not isinstance(mac_address, str):
        raise InvalidHardwareAddress(f"Invalid MAC address: {mac_address!r}")
    mac = _SEPARATORS.sub("", mac_address.strip())
    if not _HEX12.fullmatch(mac):
        raise InvalidHardwareAddress(f"Invalid MAC address: {mac_address!r}")
    return bytes.fromhex(mac)


def format_mac(mac_address: str) -> str:
    """Canonical upper-case, colon-separated form."""
    return ":".join(f"{b:02X}" for b in parse_mac(mac_address))


def build_magic_packet(mac_address: str) -> bytes:
    """Magic packet: 6x 0xFF + 16x MAC address."""
    return b"\xff" * 6 + parse_mac(mac_address) * 16


def _resolve_destination(broadcast: str, port: int) -> tuple[str, int]:
    if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 65535:
        raise AddressResolutionError(f"Invalid UDP port: {port!r}")
    try:
        infos = socket.getaddrinfo(broadcast, port, socket.AF_INET, socket.SOCK_DGRAM)
    except (socket.gaierror, UnicodeError) as e:
        raise AddressResolutionError(f"Cannot resolve {broadcast}:{port}: {e}") from e
    if not infos:
        raise AddressResolutionError(f"Cannot resolve {broadcast}:{port}")
    return infos[0][4][:2]


def send_wol(
    mac_address: str,
    broadcast: str = DEFAULT_BROADCAST,
    port: int = DEFAULT_PORT,
    local_address: str | None = None,
) -> int:
    """
    Send a Wake-on-LAN magic packet.

    Args:
        mac_address: MAC address in format "AA:BB:CC:DD:EE:FF" or "AA-BB-CC-DD-EE-FF"
        broadcast: Broadcast address (default: 255.255.255.255)
        port: UDP port (default: 9)
        local_address: Local IPv4 address to send from (multi-homed hosts)

    Returns:
        Number of bytes written, always 102.
    """
    packet = build_magic_packet(mac_address)
    destination = _resolve_destination(broadcast, port)

    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError as e:
        raise SocketError(f"Cannot create UDP socket: {e}") from e

    with sock:
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
            if local_address:
                sock.bind((local_address, 0))
        except OSError as e:
            raise SocketError(f"Cannot bind UDP socket to {local_address}: {e}") from e

        logger.info("Attempting to send a magic packet to MAC %s", mac_address)
        logger.info("... Broadcasting to: %s:%s", *destination)
        try:
            sent = sock.sendto(packet, destination)
        except OSError as e:
            raise SocketError(f"Failed to send magic packet to {broadcast}:{port}: {e}") from e

    if sent != MAGIC_PACKET_SIZE:
        raise ShortWrite(sent, MAGIC_PACKET_SIZE)

    logger.info("Magic packet sent successfully to %s", mac_address)
    return sent


def wake(mac_address: str, target: WakeTarget | None = None) -> int:
    """Send a magic packet for ``mac_address`` to ``target``."""
    target = target or WakeTarget()
    return send_wol(mac_address, target.broadcast_ip, target.port, target.local_address)
