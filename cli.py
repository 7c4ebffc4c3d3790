from __future__ import annotations

import argparse
import json
import sys

import requests


def _print(obj) -> None:
    print(json.dumps(obj, indent=2, ensure_ascii=False))


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Multi-Collection Reconciler CLI")
    p.add_argument("--api", default="http://localhost:8000", help="API base URL")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("health", help="Check the preview service")

    s_ev = sub.add_parser("events", help="Show journal events")
    s_ev.add_argument("--limit", type=int, default=20)

    s_prev = sub.add_parser("preview", help="Run one set-data/submit cycle")
    s_prev.add_argument("--file", required=True, help="JSON file with configs, data and submitted")
    s_prev.add_argument("--discriminator", default=None, help="Value key naming a row's config")
    s_prev.add_argument("--allow-add", action="store_true")
    s_prev.add_argument("--allow-delete", action="store_true")
    s_prev.add_argument("--delete-empty", action="store_true")

    args = p.parse_args(argv)

    base = args.api.rstrip("/")

    if args.cmd == "health":
        r = requests.get(f"{base}/health", timeout=10)
        _print(r.json())
        return 0 if r.ok else 1

    if args.cmd == "events":
        _print(requests.get(f"{base}/events", params={"limit": args.limit}, timeout=10).json())
        return 0

    if args.cmd == "preview":
        with open(args.file, encoding="utf-8") as fh:
            payload = json.load(fh)
        options = payload.setdefault("options", {})
        # Flags only switch policies on; the file may already enable them.
        for flag in ("allow_add", "allow_delete", "delete_empty"):
            if getattr(args, flag):
                options[flag] = True
        if args.discriminator:
            payload["discriminator"] = args.discriminator
        r = requests.post(f"{base}/preview", json=payload, timeout=30)
        _print(r.json())
        return 0 if r.ok else 1

    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
