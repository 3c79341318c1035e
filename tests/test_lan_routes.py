"""Tests for the wake and host-list routes."""

import asyncio
import time
from unittest.mock import patch

import pytest
from httpx import AsyncClient

from lanwake.config import settings
from lanwake.errors import (
    InterfaceNotFound,
    InvalidHardwareAddress,
    NoUsableAddress,
    ReportDecodeError,
    ScanLaunchError,
    ScanProcessError,
    ShortWrite,
    SocketError,
)
from lanwake.services.lan_service import WakeResult
from lanwake.utils.wol import WakeTarget


def _result(dry_run=False):
    return WakeResult(
        mac_address="AA:BB:CC:DD:EE:FF",
        target=WakeTarget("255.255.255.255", 9, "192.168.1.42"),
        bytes_sent=0 if dry_run else 102,
        dry_run=dry_run,
    )


class TestWol:
    @pytest.mark.asyncio
    async def test_wol_default(self, client: AsyncClient, mock_lan_service):
        mock_lan_service.wake.return_value = _result()

        resp = await client.post("/api/wol")

        assert resp.status_code == 200
        data = resp.json()
        assert data["wol_sent"] is True
        assert data["bytes_sent"] == 102
        assert data["local_address"] == "192.168.1.42"
        mock_lan_service.wake.assert_called_once_with(None, None, None)

    @pytest.mark.asyncio
    async def test_wol_with_overrides(self, client: AsyncClient, mock_lan_service):
        mock_lan_service.wake.return_value = _result()

        resp = await client.post(
            "/api/wol",
            json={"mac_address": "aa:bb:cc:dd:ee:ff", "broadcast_ip": "192.168.1.255", "port": 7},
        )

        assert resp.status_code == 200
        mock_lan_service.wake.assert_called_once_with("aa:bb:cc:dd:ee:ff", "192.168.1.255", 7)

    @pytest.mark.asyncio
    async def test_wol_dev_mode(self, client: AsyncClient, mock_lan_service):
        mock_lan_service.wake.return_value = _result(dry_run=True)

        resp = await client.post("/api/wol")

        assert resp.status_code == 200
        assert resp.json()["wol_sent"] is False
        assert resp.json()["dry_run"] is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [InvalidHardwareAddress("Invalid MAC address: 'x'"), InterfaceNotFound("eth9")],
    )
    async def test_wol_bad_request(self, client: AsyncClient, mock_lan_service, error):
        mock_lan_service.wake.side_effect = error

        resp = await client.post("/api/wol")

        assert resp.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [SocketError("Network is unreachable"), ShortWrite(50, 102)])
    async def test_wol_send_failure(self, client: AsyncClient, mock_lan_service, error):
        mock_lan_service.wake.side_effect = error

        resp = await client.post("/api/wol")

        assert resp.status_code == 502
        assert "Failed to send WoL packet" in resp.json()["detail"]

    @pytest.mark.asyncio
    async def test_wol_port_validation(self, client: AsyncClient, mock_lan_service):
        resp = await client.post("/api/wol", json={"port": 70000})
        assert resp.status_code == 422
        mock_lan_service.wake.assert_not_called()


class TestHosts:
    @pytest.mark.asyncio
    async def test_list_hosts(self, client: AsyncClient, mock_lan_service):
        mock_lan_service.list_hosts.return_value = ("10.0.0.0", ["10.0.0.1", "10.0.0.2", "10.0.0.5"])

        resp = await client.get("/api/hosts")

        assert resp.status_code == 200
        data = resp.json()
        assert data == {
            "subnet": "10.0.0.0",
            "only_up": False,
            "count": 3,
            "addresses": ["10.0.0.1", "10.0.0.2", "10.0.0.5"],
        }
        mock_lan_service.list_hosts.assert_called_once_with(False)

    @pytest.mark.asyncio
    async def test_list_hosts_only_up(self, client: AsyncClient, mock_lan_service):
        mock_lan_service.list_hosts.return_value = ("10.0.0.0", ["10.0.0.1"])

        resp = await client.get("/api/hosts", params={"only_up": "true"})

        assert resp.status_code == 200
        assert resp.json()["only_up"] is True
        mock_lan_service.list_hosts.assert_called_once_with(True)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error,status",
        [
            (NoUsableAddress("eth0"), 400),
            (ScanLaunchError("Cannot start nmap"), 503),
            (ReportDecodeError("Malformed nmap XML"), 502),
            (ScanProcessError(1, "boom"), 502),
        ],
    )
    async def test_list_hosts_errors(self, client: AsyncClient, mock_lan_service, error, status):
        mock_lan_service.list_hosts.side_effect = error

        resp = await client.get("/api/hosts")

        assert resp.status_code == status
        assert "addresses" not in resp.json()

    @pytest.mark.asyncio
    async def test_list_hosts_timeout(self, client: AsyncClient, mock_lan_service):
        mock_lan_service.list_hosts.side_effect = lambda only_up: time.sleep(0.5)

        with patch.object(settings, "scan_timeout_seconds", 0.05):
            resp = await client.get("/api/hosts")

        assert resp.status_code == 504

    @pytest.mark.asyncio
    async def test_abandoned_scan_blocks_new_scans_until_it_exits(self, client: AsyncClient, mock_lan_service):
        def slow_scan(only_up):
            time.sleep(0.3)
            return "192.168.1.0", ["192.168.1.1"]

        mock_lan_service.list_hosts.side_effect = slow_scan

        with patch.object(settings, "scan_timeout_seconds", 0.05):
            first = await client.get("/api/hosts")
            second = await client.get("/api/hosts")

        assert first.status_code == 504
        assert second.status_code == 409
        assert mock_lan_service.list_hosts.call_count == 1

        await asyncio.sleep(0.6)
        third = await client.get("/api/hosts")

        assert third.status_code == 200
        assert third.json()["addresses"] == ["192.168.1.1"]
        assert mock_lan_service.list_hosts.call_count == 2


class TestAuth:
    @pytest.mark.asyncio
    async def test_missing_token(self, client: AsyncClient, mock_lan_service):
        with patch("lanwake.api.deps.settings") as mock_settings:
            mock_settings.api_token = "s3cret"
            resp = await client.post("/api/wol")

        assert resp.status_code == 401
        mock_lan_service.wake.assert_not_called()

    @pytest.mark.asyncio
    async def test_wrong_token(self, client: AsyncClient, mock_lan_service):
        with patch("lanwake.api.deps.settings") as mock_settings:
            mock_settings.api_token = "s3cret"
            resp = await client.get("/api/hosts", headers={"Authorization": "Bearer nope"})

        assert resp.status_code == 401
        mock_lan_service.list_hosts.assert_not_called()

    @pytest.mark.asyncio
    async def test_valid_token(self, client: AsyncClient, mock_lan_service):
        mock_lan_service.wake.return_value = _result()

        with patch("lanwake.api.deps.settings") as mock_settings:
            mock_settings.api_token = "s3cret"
            resp = await client.post("/api/wol", headers={"Authorization": "Bearer s3cret"})

        assert resp.status_code == 200
