"""Host discovery route — nmap ping scan of the local /24."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from lanwake.api.deps import lan_service, require_operator
from lanwake.config import settings
from lanwake.errors import InterfaceError, ReportDecodeError, ScanLaunchError, ScanProcessError
from lanwake.schemas.lan import HostListResponse
from lanwake.services.lan_service import LanService

logger = logging.getLogger(__name__)
router = APIRouter()


def _forget_scan(app_state, task: asyncio.Future) -> None:
    if getattr(app_state, "host_scan", None) is task:
        app_state.host_scan = None
    if not task.cancelled() and task.exception() is not None:
        logger.debug("Background host scan ended with: %s", task.exception())


@router.get("", response_model=HostListResponse, dependencies=[Depends(require_operator)])
async def list_hosts(
    request: Request,
    only_up: Optional[bool] = None,
    service: LanService = Depends(lan_service),
):
    """Ping-scan the local /24 and list the hosts nmap reported.

    Only one scan runs at a time. nmap has no timeout of its own, so a scan
    that outlives its request keeps the slot until the process exits.
    """
    if only_up is None:
        only_up = settings.scan_only_up

    state = request.app.state
    if getattr(state, "host_scan", None) is not None:
        raise HTTPException(409, "A host scan is already running")

    task = asyncio.ensure_future(asyncio.to_thread(service.list_hosts, only_up))
    state.host_scan = task
    task.add_done_callback(lambda t: _forget_scan(state, t))

    try:
        subnet, addresses = await asyncio.wait_for(asyncio.shield(task), timeout=settings.scan_timeout_seconds)
    except InterfaceError as e:
        raise HTTPException(400, str(e))
    except ScanLaunchError as e:
        logger.error("Host discovery unavailable: %s", e)
        raise HTTPException(503, f"Host discovery unavailable: {e}")
    except (ReportDecodeError, ScanProcessError) as e:
        logger.error("Host discovery failed: %s", e)
        raise HTTPException(502, f"Host discovery failed: {e}")
    except asyncio.TimeoutError:
        logger.warning("Host discovery timed out after %ss", settings.scan_timeout_seconds)
        raise HTTPException(504, "Host discovery timed out")

    return HostListResponse(subnet=subnet, only_up=only_up, count=len(addresses), addresses=addresses)
