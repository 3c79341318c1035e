"""LanWake configuration — Pydantic BaseSettings loaded from .env."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from lanwake.utils.wol import DEFAULT_BROADCAST, DEFAULT_PORT, format_mac


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = "LanWake"
    debug: bool = False
    log_level: str = "INFO"

    # HTTP API
    host: str = "0.0.0.0"
    port: int = 8000
    api_prefix: str = "/api"
    cors_origins: Annotated[list[str], NoDecode] = [
        "http://localhost:5173",
        "http://localhost:8000",
    ]

    # Operator auth, empty disables it
    api_token: str = ""

    # Wake-on-LAN target
    mac_address: str = ""  # Machine woken by POST /wol without a body
    broadcast_ip: str = DEFAULT_BROADCAST
    udp_port: int = DEFAULT_PORT
    interface: str = ""  # e.g. "eth0"; empty = wildcard bind, first usable interface for scans

    # Host discovery
    nmap_path: str = "nmap"
    scan_timeout_seconds: float = 120.0
    scan_only_up: bool = False

    # Mode: dev = packets built but not sent, prod = real network
    mode: str = "prod"

    uvicorn_workers: int = 1

    @property
    def is_dev_mode(self) -> bool:
        return self.mode == "dev"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LANWAKE_",
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, value: list[str] | str) -> list[str]:
        if isinstance(value, str) and not value.startswith("["):
            return [o.strip() for o in value.split(",") if o.strip()]
        if isinstance(value, list):
            return value
        return ["http://localhost:5173"]

    @field_validator("mac_address")
    @classmethod
    def normalize_mac(cls, value: str) -> str:
        if not value:
            return value
        return format_mac(value)

    @field_validator("udp_port")
    @classmethod
    def check_port(cls, value: int) -> int:
        if not 0 <= value <= 65535:
            raise ValueError(f"UDP port out of range: {value}")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
