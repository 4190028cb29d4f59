"""
tictactoe-ws CLI - Command-line interface for the server.

Usage:
    tictactoe-ws serve [--host HOST] [--port PORT] [--log-level LEVEL]

Flags override the HOST, PORT and LOG_LEVEL environment variables.
"""

import argparse
import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Authoritative shared tic-tac-toe server",
        prog="tictactoe-ws",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    serve_parser = subparsers.add_parser("serve", help="Run the WebSocket server")
    serve_parser.add_argument("--host", help="Bind address (env HOST)")
    serve_parser.add_argument("--port", type=int, help="Listen port (env PORT, default 8080)")
    serve_parser.add_argument("--log-level", help="Logging level (env LOG_LEVEL, default INFO)")

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args):
    """Run the server with uvicorn until the process is stopped."""
    import uvicorn

    from .config import Settings
    from .api.app import create_app

    settings = Settings.from_env()
    if args.host:
        settings.host = args.host
    if args.port is not None:
        settings.port = args.port
    if args.log_level:
        settings.log_level = args.log_level.upper()

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    logger = logging.getLogger(__name__)
    logger.info("Listening on ws://%s:%d", settings.host, settings.port)

    uvicorn.run(
        create_app(settings=settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
