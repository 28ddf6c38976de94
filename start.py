"""
Convenience launcher — starts the RhythmWatch timer service.

Usage:
    python start.py             # service on the configured host/port
    python start.py --port 9000
"""

from __future__ import annotations

import argparse
import os
import subprocess
import sys


def start_service(port: int | None) -> subprocess.Popen:
    env = dict(os.environ)
    if port is not None:
        env["RW_API_PORT"] = str(port)
    return subprocess.Popen(
        [sys.executable, "-m", "rhythmwatch.main"],
        stdout=sys.stdout,
        stderr=sys.stderr,
        env=env,
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Start the RhythmWatch timer service")
    parser.add_argument("--port", type=int, default=None, help="Override the API port")
    args = parser.parse_args()

    from rhythmwatch.config import config
    port = args.port or config.api_port

    print("Starting RhythmWatch…")
    proc = start_service(args.port)

    print(f"\nService → http://{config.api_host}:{port}")
    print("Commands → rhythmwatch work | break HH:MM:SS | reset | status")
    print("Press Ctrl+C to stop.\n")

    try:
        proc.wait()
    except KeyboardInterrupt:
        print("\nShutting down…")
        proc.terminate()
        proc.wait()


if __name__ == "__main__":
    main()
