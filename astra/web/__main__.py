"""Entry point for the web version: python -m astra.web"""

import argparse
import logging
from pathlib import Path

from astra.web.server import run_server


def main() -> None:
    parser = argparse.ArgumentParser(description="Astra — Cosmic Clicker (Web Edition)")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=5000, help="Port (default: 5000)")
    parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    parser.add_argument("--save-path", type=Path, default=None,
                        help="Save file (default: ~/.astra/save.json)")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(f"\n  ✦ Astra — Cosmic Clicker (Web Edition)")
    print(f"  ➜ http://{args.host}:{args.port}/api/state\n")

    run_server(host=args.host, port=args.port, debug=args.debug, save_path=args.save_path)


if __name__ == "__main__":
    main()
