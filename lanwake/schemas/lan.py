"""Wake-on-LAN and host discovery schemas."""

from pydantic import BaseModel, Field


class WakeRequest(BaseModel):
    """Optional per-request overrides of the configured wake target."""
    mac_address: str | None = None
    broadcast_ip: str | None = None
    port: int | None = Field(default=None, ge=0, le=65535)


class WakeResponse(BaseModel):
    wol_sent: bool
    mac_address: str
    broadcast_ip: str
    port: int
    local_address: str | None = None
    bytes_sent: int
    dry_run: bool = False


class HostListResponse(BaseModel):
    subnet: str
    only_up: bool
    count: int
    addresses: list[str]
