"""Business logic services — singleton registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lanwake.config import settings

if TYPE_CHECKING:
    from lanwake.services.lan_service import LanService

logger = logging.getLogger(__name__)

_lan_service: LanService | None = None


def init_services() -> None:
    """Create and wire up all service singletons."""
    global _lan_service

    from lanwake.services.discovery import HostDiscoverer
    from lanwake.services.lan_service import LanService

    _lan_service = LanService(settings, HostDiscoverer(settings.nmap_path))

    if not settings.api_token:
        logger.warning(
            "API token not configured (LANWAKE_API_TOKEN) — "
            "wake and scan endpoints are unauthenticated"
        )
    if not settings.mac_address:
        logger.warning("No default MAC configured (LANWAKE_MAC_ADDRESS) — /wol requires a mac_address")
    logger.info(
        "Services initialized (interface=%s, broadcast=%s:%s, nmap=%s)",
        settings.interface or "<any>", settings.broadcast_ip, settings.udp_port, settings.nmap_path,
    )


def shutdown_services() -> None:
    global _lan_service
    _lan_service = None


def get_lan_service() -> LanService:
    if _lan_service is None:
        raise RuntimeError("Services not initialized — call init_services() first")
    return _lan_service
