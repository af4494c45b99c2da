"""
Configuration helpers for the sysctld server.

This module centralizes the listen address, logging options, the procfs root
used on Linux, and the optional CORS allow-list. Values are read from the
environment once at import time; the command line may override the address.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Tuple

DEFAULT_ADDRESS = os.getenv("SYSCTLD_ADDRESS", ":8080")
DEFAULT_PROCFS_ROOT = os.getenv("SYSCTLD_PROCFS_ROOT", "/proc/sys")
LOG_LEVEL = os.getenv("SYSCTLD_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("SYSCTLD_LOG_FORMAT", "json")  # json or plain

# An empty host means "all interfaces".
ALL_INTERFACES = "0.0.0.0"


def _parse_origins(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def parse_address(address: str) -> Tuple[str, int]:
    """
    Split a ``host:port`` listen address.

    ``":8080"`` binds all interfaces; IPv6 hosts use brackets (``"[::1]:8080"``).

    Raises:
        ValueError: if the port is missing, not a number, or out of range.
    """
    host, sep, port_raw = address.strip().rpartition(":")
    if not sep:
        raise ValueError(f"missing port in address {address!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"invalid port {port_raw!r} in address {address!r}") from None
    if not 0 < port < 65536:
        raise ValueError(f"port {port} out of range in address {address!r}")
    return host or ALL_INTERFACES, port


@dataclass(slots=True)
class SysctldConfig:
    """Runtime configuration for the sysctl HTTP server."""

    address: str = DEFAULT_ADDRESS
    procfs_root: str = DEFAULT_PROCFS_ROOT
    log_level: str = LOG_LEVEL
    log_format: str = LOG_FORMAT
    cors_allowed_origins: List[str] = field(
        default_factory=lambda: _parse_origins(os.getenv("SYSCTLD_CORS_ALLOWED_ORIGINS"))
    )


default_config = SysctldConfig()
