"""System status schemas."""

from pydantic import BaseModel


class InterfaceStatus(BaseModel):
    """One local network interface."""
    name: str
    is_up: bool
    addresses: list[str] = []
    usable_address: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    version: str
    service: str = "lanwake"
    dev_mode: bool = False
