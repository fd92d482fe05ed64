from __future__ import annotations

import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable

from . import db


@dataclass(frozen=True)
class Service:
    name: str
    address: str
    expires_at: float  # clock() value; internal only, never serialized


class ServiceCache:
    """Address-keyed service records with TTL expiry.

    The poller writes through ``upsert`` and HTTP handlers read through
    ``snapshot``; both share one lock. Records are immutable, a refresh
    replaces the record for its address.

    Expired records are swept lazily: ``upsert`` sweeps once the next sweep is
    due, ``snapshot`` always sweeps first so it never returns an expired record.
    """

    def __init__(self, ttl_s: float = 60.0, clock: Callable[[], float] = time.monotonic) -> None:
        if ttl_s <= 0:
            raise ValueError("ttl_s must be positive.")
        self.ttl_s = float(ttl_s)
        self.clock = clock
        self._lock = Lock()
        self._services: dict[str, Service] = {}  # address -> record
        self._next_sweep = clock() + self.ttl_s

    def __len__(self) -> int:
        with self._lock:
            return len(self._services)

    def upsert(self, address: str, name: str) -> bool:
        """Add or refresh the record for ``address``.

        Returns True on first discovery of the address. Empty address or name
        is dropped without error.
        """
        if not address or not name:
            return False
        with self._lock:
            now = self.clock()
            expired = self._sweep_locked(now) if now >= self._next_sweep else []
            is_new = address not in self._services
            self._services[address] = Service(name=name, address=address, expires_at=now + self.ttl_s)
        self._report_expired(expired)
        if is_new:
            db.log_event("INFO", f"found new service: {name} ({address})", service_name=name, address=address)
        return is_new

    def sweep(self) -> int:
        """Remove every expired record. Returns how many were removed."""
        with self._lock:
            expired = self._sweep_locked(self.clock())
        self._report_expired(expired)
        return len(expired)

    def snapshot(self) -> list[Service]:
        """Current records sorted by name (address breaks ties)."""
        with self._lock:
            expired = self._sweep_locked(self.clock())
            services = sorted(self._services.values(), key=lambda s: (s.name, s.address))
        self._report_expired(expired)
        return services

    def _sweep_locked(self, now: float) -> list[Service]:
        expired = [s for s in self._services.values() if s.expires_at <= now]
        for s in expired:
            del self._services[s.address]
        self._next_sweep = now + self.ttl_s
        return expired

    @staticmethod
    def _report_expired(expired: list[Service]) -> None:
        for s in expired:
            db.log_event("INFO", "service expired", service_name=s.name, address=s.address)
