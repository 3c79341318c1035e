"""Test fixtures — FastAPI test client with a mocked LAN service."""

from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from lanwake.api.deps import lan_service
from lanwake.main import create_app
from lanwake.services.lan_service import LanService


@pytest.fixture
def mock_lan_service():
    return MagicMock(spec=LanService)


@pytest_asyncio.fixture
async def client(mock_lan_service):
    """Provide an async test client with the LAN service overridden."""
    app = create_app()
    app.dependency_overrides[lan_service] = lambda: mock_lan_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
