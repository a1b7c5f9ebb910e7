# tnt/dashboard/__main__.py
# -----------------------------------------------------------------------------
# Entry point for the driver-station dashboard.
# Listens for the robot's JSONL metrics stream and prints the latest values.
# -----------------------------------------------------------------------------

from __future__ import annotations

import argparse

from ..shared import config as C
from .server import serve_forever


def main():
    parser = argparse.ArgumentParser(description="TNT metrics dashboard")
    parser.add_argument("--host", type=str, default=C.LISTEN_HOST)
    parser.add_argument("--port", type=int, default=C.LISTEN_PORT)
    parser.add_argument("--debug", action="store_true", help="Log every received message")
    args = parser.parse_args()

    try:
        serve_forever(args.host, args.port, debug=args.debug)
    except KeyboardInterrupt:
        print("\n[Dashboard] Interrupted.")


if __name__ == "__main__":
    main()
