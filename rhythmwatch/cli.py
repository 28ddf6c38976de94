"""
Command-line client for a running RhythmWatch service.

Usage:
    rhythmwatch work
    rhythmwatch break 00:25:00
    rhythmwatch reset
    rhythmwatch status
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

import httpx

from .config import config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rhythmwatch", description="Control the RhythmWatch timer")
    parser.add_argument(
        "--url",
        default=f"http://{config.api_host}:{config.api_port}",
        help="Base URL of the RhythmWatch API",
    )
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("work", help="Start (or restart) a work run")
    brk = sub.add_parser("break", help="Start a break of the given length")
    brk.add_argument("time", nargs="?", default=None, help="HH:MM:SS or MM:SS (default: 0)")
    sub.add_parser("reset", help="Stop the timer and go idle")
    sub.add_parser("status", help="Show the current session")
    return parser


def _request(client: httpx.Client, args: argparse.Namespace) -> httpx.Response:
    if args.command == "work":
        return client.post("/session/work")
    if args.command == "break":
        return client.post("/session/break", json={"time": args.time})
    if args.command == "reset":
        return client.post("/session/reset")
    return client.get("/session")


def main(argv: Optional[Sequence[str]] = None, transport: Optional[httpx.BaseTransport] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        with httpx.Client(base_url=args.url, timeout=5.0, transport=transport) as client:
            response = _request(client, args)
            response.raise_for_status()
    except httpx.HTTPError as exc:
        print(f"rhythmwatch: {exc}", file=sys.stderr)
        return 1

    body = response.json()
    print(f"{body['mode']:<9} {body['formatted_time']}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
