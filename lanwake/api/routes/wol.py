"""Wake-on-LAN route — send a magic packet to the configured or given MAC."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException

from lanwake.api.deps import lan_service, require_operator
from lanwake.errors import AddressResolutionError, InterfaceError, InvalidHardwareAddress, WakeError
from lanwake.schemas.lan import WakeRequest, WakeResponse
from lanwake.services.lan_service import LanService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=WakeResponse, dependencies=[Depends(require_operator)])
async def wake_on_lan(
    body: WakeRequest | None = None,
    service: LanService = Depends(lan_service),
):
    """Send a Wake-on-LAN packet to the configured or given MAC."""
    body = body or WakeRequest()

    try:
        result = await asyncio.to_thread(
            service.wake, body.mac_address, body.broadcast_ip, body.port,
        )
    except (InvalidHardwareAddress, AddressResolutionError, InterfaceError) as e:
        raise HTTPException(400, str(e))
    except WakeError as e:
        logger.error("WoL failed: %s", e)
        raise HTTPException(502, f"Failed to send WoL packet: {e}")

    return WakeResponse(
        wol_sent=not result.dry_run,
        mac_address=result.mac_address,
        broadcast_ip=result.target.broadcast_ip,
        port=result.target.port,
        local_address=result.target.local_address,
        bytes_sent=result.bytes_sent,
        dry_run=result.dry_run,
    )
