"""CLI entry point for Petstores MCP server."""

import argparse
import asyncio
import sys

from .config import ServerConfig


def build_parser(config: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Petstores MCP Server - pet food shop with a shopping cart")
    parser.add_argument(
        "--mode",
        choices=["stdio", "http"],
        default="stdio",
        help="Server mode: stdio (for MCP clients) or http (streamable HTTP + REST)",
    )
    parser.add_argument(
        "--host",
        default=config.host,
        help=f"Host to bind to (HTTP mode only, default: {config.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.port,
        help=f"Port to bind to (HTTP mode only, default: {config.port})",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable hot reloading (HTTP mode only, watches for file changes)",
    )
    return parser


def main() -> None:
    """CLI entry point."""
    args = build_parser(ServerConfig()).parse_args()

    try:
        if args.mode == "http":
            from .http_server import run_http_server
            run_http_server(host=args.host, port=args.port, reload=args.reload)
        else:
            from .server import main as server_main
            asyncio.run(server_main())
    except KeyboardInterrupt:
        print("\nShutting down...", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    main()
