from __future__ import annotations

import argparse
import sys
from dataclasses import replace

import uvicorn

from lsr import db
from lsr.app import create_app
from lsr.cache import ServiceCache
from lsr.docker_ops import DockerRuntime, RuntimeUnavailable, connect
from lsr.poller import Poller
from lsr.settings import Settings, parse_listen_addr, settings


def load_settings(argv: list[str] | None = None) -> Settings:
    """Environment-derived settings, overridden by any flags given."""
    p = argparse.ArgumentParser(description="Label Service Registry server")
    p.add_argument("--docker-addr", dest="docker_url", help="Docker engine endpoint")
    p.add_argument("--http-port", dest="http_addr", help="Listen address, host:port or :port")
    p.add_argument("--poll-interval", dest="poll_interval_s", type=int, help="Seconds between container polls")
    p.add_argument("--ttl", dest="service_ttl_s", type=int, help="Seconds a discovered service stays listed")
    p.add_argument("--db-path", dest="db_path", help="SQLite file for the event log")
    args = p.parse_args(argv)

    overrides = {k: v for k, v in vars(args).items() if v is not None}
    return replace(settings, **overrides)


def main(argv: list[str] | None = None) -> int:
    cfg = load_settings(argv)
    try:
        host, port = parse_listen_addr(cfg.http_addr)
        cache = ServiceCache(ttl_s=cfg.service_ttl_s)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    db.init_db(cfg.db_path)

    try:
        client = connect(cfg.docker_url)
    except RuntimeUnavailable as e:
        db.log_event("ERROR", str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1

    try:
        poller = Poller(
            cache,
            DockerRuntime(client),
            interval_s=cfg.poll_interval_s,
            address_label=cfg.address_label,
            name_label=cfg.name_label,
        )
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    db.log_event("INFO", f"starting http server on {host}:{port}")
    # uvicorn traps SIGINT/SIGTERM; the poller thread is a daemon and stops with the app.
    uvicorn.run(create_app(cache, poller), host=host, port=port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
