"""Command-line interface for the auth gateway."""

import argparse
import logging
import sys

from auth_gateway import __version__
from auth_gateway.auth.registry import PROVIDER_CLASSES, provider_credentials
from auth_gateway.config import get_settings


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from auth_gateway.api import create_app

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def _providers(args: argparse.Namespace) -> int:
    settings = get_settings()
    for key, (client_id, client_secret) in provider_credentials(settings).items():
        state = "configured" if client_id and client_secret else "not configured"
        print(f"{key:<14} {PROVIDER_CLASSES[key].label:<14} {state}")
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Auth Gateway - Sign in with local or provider accounts and proxy movie APIs"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument("--host", help="Bind address (default: HOST setting)")
    serve_parser.add_argument("--port", type=int, help="Bind port (default: PORT setting)")
    serve_parser.set_defaults(handler=_serve)

    # Providers command
    providers_parser = subparsers.add_parser(
        "providers", help="Show which identity providers are configured"
    )
    providers_parser.set_defaults(handler=_providers)

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
