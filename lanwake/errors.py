"""Error taxonomy for wake, interface and discovery operations."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lanwake.services.discovery import ScanReport


class LanWakeError(Exception):
    """Base class for all LanWake failures."""


# --- Wake path ---


class WakeError(LanWakeError):
    """Magic packet could not be built or delivered."""


class InvalidHardwareAddress(WakeError, ValueError):
    """MAC address does not normalize to exactly 6 bytes."""


class AddressResolutionError(WakeError):
    """Broadcast address or port is malformed."""


class SocketError(WakeError, OSError):
    """UDP socket could not be created, bound or written."""


class ShortWrite(WakeError):
    """Fewer bytes were sent than the magic packet holds."""

    def __init__(self, sent: int, expected: int):
        super().__init__(f"magic packet sent was {sent} bytes (expected {expected} bytes sent)")
        self.sent = sent
        self.expected = expected


# --- Interface resolution ---


class InterfaceError(LanWakeError):
    """Local interface address could not be resolved."""

    def __init__(self, interface: str, message: str):
        super().__init__(message)
        self.interface = interface


class InterfaceNotFound(InterfaceError):
    def __init__(self, interface: str):
        super().__init__(interface, f"network interface {interface!r} not found")


class NoAddressOnInterface(InterfaceError):
    def __init__(self, interface: str):
        super().__init__(interface, f"no address associated with interface {interface!r}")


class NoUsableAddress(InterfaceError):
    def __init__(self, interface: str):
        label = repr(interface) if interface else "any interface"
        super().__init__(interface, f"no non-loopback IPv4 address on {label}")


# --- Host discovery ---


class DiscoveryError(LanWakeError):
    """Host discovery failed; ``report`` holds whatever was decoded."""

    def __init__(self, message: str, report: ScanReport | None = None):
        super().__init__(message)
        self.report = report


class ScanLaunchError(DiscoveryError):
    """The scanner process could not be started."""


class ReportDecodeError(DiscoveryError):
    """The scanner output is not a well-formed nmap XML report."""


class ScanProcessError(DiscoveryError):
    """The scanner exited with a non-zero status."""

    def __init__(self, returncode: int, stderr: str = "", report: ScanReport | None = None):
        message = f"nmap exited with status {returncode}"
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message, report)
        self.returncode = returncode
        self.stderr = stderr
