"""System status — local network interfaces."""

from fastapi import APIRouter

from lanwake.schemas.system import InterfaceStatus
from lanwake.utils.interfaces import list_interfaces

router = APIRouter()


@router.get("/interfaces", response_model=list[InterfaceStatus])
async def interfaces():
    """Local interfaces, their IPs and the address a wake or scan would use."""
    return [
        InterfaceStatus(
            name=info.name,
            is_up=info.is_up,
            addresses=info.addresses,
            usable_address=info.usable_address,
        )
        for info in list_interfaces()
    ]
