"""API route registration."""

from fastapi import APIRouter

from lanwake.api.routes import health, hosts, system, wol

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(system.router, prefix="/system", tags=["system"])
api_router.include_router(wol.router, prefix="/wol", tags=["wol"])
api_router.include_router(hosts.router, prefix="/hosts", tags=["hosts"])
