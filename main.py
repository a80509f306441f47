"""CLI entry point: python main.py [--config path/to/config.json]"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from config import ENGINES, load_config
from server import run_server


def main():
    parser = argparse.ArgumentParser(
        description="Browser automation tools (Playwright) served over MCP stdio"
    )
    parser.add_argument(
        "--config",
        help="Path to a server config JSON file (defaults are used when omitted)",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Launch browsers with a visible window by default",
    )
    parser.add_argument(
        "--engine",
        choices=ENGINES,
        help="Default browser engine for launch_browser",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args()

    # stdout carries the protocol; logs go to stderr
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    if args.headed:
        config.browser.headless = False
    if args.engine:
        config.browser.engine = args.engine

    logging.getLogger(__name__).info(
        f"Server: {config.server_name} {config.server_version} | "
        f"Engine: {config.browser.engine} | "
        f"Headless: {config.browser.headless}"
    )

    try:
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
