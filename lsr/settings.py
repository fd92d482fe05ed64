from __future__ import annotations

import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def parse_listen_addr(addr: str) -> tuple[str, int]:
    """Split a listen address such as ``:80`` or ``127.0.0.1:8080``.

    An empty host means all interfaces.
    """
    host, sep, port = addr.strip().rpartition(":")
    if not sep:
        raise ValueError(f"Invalid listen address {addr!r}. Use host:port or :port.")
    try:
        port_no = int(port)
    except ValueError:
        raise ValueError(f"Invalid port in listen address {addr!r}.") from None
    if not 0 < port_no < 65536:
        raise ValueError(f"Port out of range in listen address {addr!r}.")
    return host.strip("[]") or "0.0.0.0", port_no


@dataclass(frozen=True)
class Settings:
    # Runtime
    docker_url: str = os.getenv("LSR_DOCKER_URL", "unix:///var/run/docker.sock")
    address_label: str = os.getenv("LSR_ADDRESS_LABEL", "land.strong.service.host")
    name_label: str = os.getenv("LSR_NAME_LABEL", "land.strong.service.name")

    # Discovery
    poll_interval_s: int = _env_int("LSR_POLL_INTERVAL_S", 10)
    service_ttl_s: int = _env_int("LSR_SERVICE_TTL_S", 60)

    # HTTP
    http_addr: str = os.getenv("LSR_HTTP_ADDR", ":80")

    # Event log (operational journal only, the cache itself is never persisted)
    db_path: str = os.getenv("LSR_DB_PATH", "lsr.db")
    # Oldest rows beyond this are deleted on write; 0 keeps everything.
    events_max: int = _env_int("LSR_EVENTS_MAX", 10000)


settings = Settings()
