"""CLI entry point for the identity verifier."""

import argparse
import asyncio
import json
import mimetypes
import sys
from pathlib import Path
from typing import Any

import uvicorn

from identity_verifier.core.exceptions import IdentityVerifierError
from identity_verifier.core.settings import AppSettings, get_settings
from identity_verifier.services.client import VerificationClient
from identity_verifier.services.risk import classify_result


def main() -> int:
    """
    Main CLI entry point.

    Returns:
        int: Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(
        description="Identity Verifier",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("server", help="Start the API gateway")
    server_parser.add_argument("--host", default=None, help="Server host")
    server_parser.add_argument("--port", type=int, default=None, help="Server port")
    server_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    # Client commands
    origin_help = "Origin for same-origin endpoints (default: the local gateway)"

    verify_parser = subparsers.add_parser("verify", help="Verify an identity document")
    verify_parser.add_argument("file", type=Path, help="Document image to submit")
    verify_parser.add_argument("--origin", default=None, help=origin_help)

    health_parser = subparsers.add_parser("health", help="Query backend health")
    health_parser.add_argument("--origin", default=None, help=origin_help)

    history_parser = subparsers.add_parser("history", help="List recent verifications")
    history_parser.add_argument("--limit", type=int, default=50, help="Maximum records")
    history_parser.add_argument("--offset", type=int, default=0, help="Records to skip")
    history_parser.add_argument("--origin", default=None, help=origin_help)

    stats_parser = subparsers.add_parser("stats", help="Show verification statistics")
    stats_parser.add_argument("--origin", default=None, help=origin_help)

    args = parser.parse_args()

    if args.command == "server":
        return run_server(args)
    elif args.command in ("verify", "health", "history", "stats"):
        return run_client_command(args)
    else:
        parser.print_help()
        return 0


def run_server(args: argparse.Namespace) -> int:
    """
    Run the API gateway.

    Args:
        args (argparse.Namespace): Parsed command line arguments.

    Returns:
        int: Exit code (0 for success).
    """
    settings = get_settings()

    host = args.host or settings.api_server.host
    port = args.port or settings.api_server.port

    uvicorn.run(
        app="identity_verifier.api.server:app",
        host=host,
        port=port,
        reload=args.reload,
    )
    return 0


def default_origin(settings: AppSettings) -> str:
    """
    Get the local gateway origin used for same-origin endpoints.

    Args:
        settings (AppSettings): Application settings instance.

    Returns:
        str: The gateway origin.
    """
    return f"http://{settings.api_server.host}:{settings.api_server.port}"


async def _execute(client: VerificationClient, args: argparse.Namespace) -> Any:
    if args.command == "verify":
        content_type, _ = mimetypes.guess_type(args.file.name)
        result = await client.verify(
            file=args.file.read_bytes(),
            filename=args.file.name,
            content_type=content_type,
        )
        return {**result.model_dump(by_alias=True), "riskTier": classify_result(result)}
    if args.command == "health":
        return await client.health()
    if args.command == "history":
        records = await client.list_verifications(limit=args.limit, offset=args.offset)
        return [record.model_dump(mode="json", by_alias=True) for record in records]
    stats = await client.get_stats()
    return stats.model_dump(by_alias=True)


def run_client_command(args: argparse.Namespace) -> int:
    """
    Run a client command and print its JSON result.

    Args:
        args (argparse.Namespace): Parsed command line arguments.

    Returns:
        int: Exit code (0 for success, 1 on failure).
    """
    settings = get_settings()

    if args.command == "verify" and not args.file.is_file():
        print(f"File not found: {args.file}", file=sys.stderr)
        return 1

    try:
        client = VerificationClient.from_settings(
            settings,
            origin=args.origin or default_origin(settings),
        )
        output = asyncio.run(_execute(client, args))
    except IdentityVerifierError as e:
        print(e.message, file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
