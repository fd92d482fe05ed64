from __future__ import annotations

import argparse
import json
import sys

import requests


def _print(obj) -> None:
    print(json.dumps(obj, indent=2, ensure_ascii=False))


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Label Service Registry CLI")
    p.add_argument("--api", default="http://localhost:80", help="Registry base URL")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("services", help="List discovered services")

    s_ev = sub.add_parser("events", help="Show registry events")
    s_ev.add_argument("--limit", type=int, default=20)

    args = p.parse_args(argv)

    base = args.api.rstrip("/")

    if args.cmd == "services":
        r = requests.get(f"{base}/", timeout=10)
    elif args.cmd == "events":
        r = requests.get(f"{base}/events", params={"limit": args.limit}, timeout=10)
    else:
        return 2

    if not r.ok:
        print(f"error: HTTP {r.status_code}", file=sys.stderr)
        return 1
    _print(r.json())
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
