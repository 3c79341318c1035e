"""Health check."""

from fastapi import APIRouter

from lanwake import __version__
from lanwake.config import settings
from lanwake.schemas.system import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Lightweight connectivity check."""
    return HealthResponse(version=__version__, dev_mode=settings.is_dev_mode)


@router.get("/ping")
async def ping():
    """Ultra-lightweight ping."""
    return {"status": "ok"}
