from __future__ import annotations

import json
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query
from fastapi.responses import Response

from . import db
from .api_models import ServiceOut
from .cache import Service, ServiceCache
from .poller import Poller


def encode_services(services: list[Service]) -> bytes:
    """Compact JSON array of {"Name", "Addr"}; same input gives the same bytes."""
    payload = [ServiceOut(Name=s.name, Addr=s.address).model_dump() for s in services]
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def create_app(cache: ServiceCache, poller: Poller | None = None) -> FastAPI:
    """HTTP front of the registry. The poller, if given, runs for the app's lifetime."""

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        if poller is not None:
            poller.start()
        try:
            yield
        finally:
            if poller is not None:
                poller.stop()

    app = FastAPI(title="Label Service Registry", lifespan=lifespan)

    @app.get("/events")
    def events(limit: int = Query(100, ge=1, le=1000)) -> list[dict]:
        return db.latest_events(limit)

    # Every other path answers with the registry listing.
    @app.get("/{path:path}")
    def list_services(path: str) -> Response:
        services = cache.snapshot()
        try:
            body = encode_services(services)
        except (TypeError, ValueError) as e:
            db.log_event("ERROR", f"error marshalling json: {type(e).__name__}: {e}")
            body = b""
        return Response(content=body, media_type="application/json")

    return app
