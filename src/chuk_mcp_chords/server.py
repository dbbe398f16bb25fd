#!/usr/bin/env python3
"""
Entry point for the Chord Composer MCP Server.

Transports:
- stdio: for MCP clients that spawn the server as a subprocess
- http: streamable HTTP on --host/--port

Exported MIDI files are written under ./output of the working directory.
"""

import argparse
import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _serve_stdio(server: Any, args: argparse.Namespace) -> Coroutine[Any, Any, None]:
    return server.run_stdio_async()


def _serve_http(server: Any, args: argparse.Namespace) -> Coroutine[Any, Any, None]:
    server.settings.host = args.host
    server.settings.port = args.port
    return server.run_streamable_http_async()


# Transport name -> coroutine factory taking (server, parsed args)
TRANSPORTS: dict[str, Callable[[Any, argparse.Namespace], Coroutine[Any, Any, None]]] = {
    "stdio": _serve_stdio,
    "http": _serve_http,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the server argument parser."""
    parser = argparse.ArgumentParser(
        prog="chuk-mcp-chords",
        description="Chord Composer MCP Server",
    )
    parser.add_argument(
        "--transport",
        choices=sorted(TRANSPORTS),
        default="stdio",
        help="Transport mode (default: stdio)",
    )
    parser.add_argument("--host", default="127.0.0.1", help="HTTP bind address")
    parser.add_argument("--port", type=int, default=8000, help="HTTP port")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and serve until the transport closes."""
    args = build_parser().parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    # The server module registers every tool on import
    from chuk_mcp_chords.async_server import mcp

    where = "stdio" if args.transport == "stdio" else f"http://{args.host}:{args.port}"
    logger.info(f"Starting Chord Composer MCP Server ({where})")
    asyncio.run(TRANSPORTS[args.transport](mcp, args))


if __name__ == "__main__":
    main()
