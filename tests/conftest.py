import os as _os
import sys

import pytest

# Ensure project root is importable (so `import main` / `import cli` work without installing)
_project_root = _os.path.dirname(_os.path.dirname(__file__))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from lsr import db  # noqa: E402
from lsr.docker_ops import ContainerRef  # noqa: E402


@pytest.fixture(autouse=True)
def event_db(tmp_path, monkeypatch):
    """Isolated sqlite event log per test."""
    monkeypatch.setattr(db, "_db_path", str(tmp_path / "events.db"))
    db.init_db()


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRuntime:
    """Stands in for DockerRuntime; hands out queued results, one per call."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0

    def list_containers(self):
        self.calls += 1
        res = self.results.pop(0) if self.results else []
        if isinstance(res, Exception):
            raise res
        return res


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_runtime():
    return FakeRuntime


@pytest.fixture
def labeled():
    """Build a ContainerRef carrying the default service labels."""

    def _make(address, name, cid="c1"):
        return ContainerRef(id=cid, labels={"land.strong.service.host": address, "land.strong.service.name": name})

    return _make
