"""LanWake — Wake-on-LAN and LAN host discovery service."""

__version__ = "0.1.0"
