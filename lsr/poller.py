from __future__ import annotations

from threading import Event, Thread
from typing import Protocol

from . import db
from .cache import ServiceCache
from .docker_ops import ContainerRef
from .settings import settings


class ContainerRuntime(Protocol):
    def list_containers(self) -> list[ContainerRef]: ...


class Poller:
    """Periodically discovers labeled containers and feeds them into the cache."""

    def __init__(
        self,
        cache: ServiceCache,
        runtime: ContainerRuntime,
        interval_s: float = settings.poll_interval_s,
        address_label: str = settings.address_label,
        name_label: str = settings.name_label,
    ):
        if interval_s <= 0:
            raise ValueError("interval_s must be positive.")
        self.cache = cache
        self.runtime = runtime
        self.interval_s = interval_s
        self.address_label = address_label
        self.name_label = name_label
        self._stop = Event()
        self._thr: Thread | None = None

    def start(self) -> None:
        if self._thr and self._thr.is_alive():
            if not self._stop.is_set():
                return
            # Stopped but not yet exited: let it finish before starting afresh.
            self._thr.join()
        self._stop.clear()
        self._thr = Thread(target=self._loop, name="lsr-poller", daemon=True)
        self._thr.start()

    def stop(self) -> None:
        self._stop.set()

    def _loop(self) -> None:
        db.log_event("INFO", "Poller started")
        while not self._stop.wait(self.interval_s):
            try:
                self.tick()
            except Exception as e:
                # Runtime hiccups only cost this tick; the next one retries.
                db.log_event("ERROR", f"could not list containers: {type(e).__name__}: {e}")
        db.log_event("INFO", "Poller stopped")

    def poll(self) -> list[tuple[str, str]]:
        """One runtime query. Returns (address, name) for every labeled container, in list order."""
        found: list[tuple[str, str]] = []
        for c in self.runtime.list_containers():
            labels = c.labels or {}
            address = labels.get(self.address_label, "")
            name = labels.get(self.name_label, "")
            if address and name:
                found.append((address, name))
        return found

    def tick(self) -> int:
        found = self.poll()
        for address, name in found:
            self.cache.upsert(address, name)
        return len(found)
