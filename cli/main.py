from __future__ import annotations

import argparse
import asyncio
import sys
from typing import List, Optional

from config import settings
from core.lookup import create_lookup_service
from monitoring.telemetry import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="waybackinator",
        description="Redirect URLs to their closest Internet Archive snapshot.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the HTTP server.")
    serve.add_argument("tld_file", nargs="?", help="Top-level domain allow-list.")
    serve.add_argument("--host", default=settings.host)
    serve.add_argument("--port", type=int, default=settings.port)

    resolve = commands.add_parser("resolve", help="Look up a single URL and exit.")
    resolve.add_argument("url")
    resolve.add_argument("tld_file", nargs="?", help="Top-level domain allow-list.")
    return parser


async def resolve_once(url: str) -> int:
    """Print the archive URL for ``url``, or the error on stderr."""
    service = create_lookup_service(settings)
    try:
        resolution = await service.lookup(url)
    finally:
        await service.close()

    if not resolution.ok:
        print(resolution.error, file=sys.stderr)
        return 1
    print(resolution.archive_url)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.tld_file:
        settings.tld_file = args.tld_file
    configure_logging(settings.log_level, settings.log_format)

    if args.command == "resolve":
        return asyncio.run(resolve_once(args.url))

    import uvicorn

    import waybackinator_web

    settings.host = args.host
    settings.port = args.port
    uvicorn.run(waybackinator_web.app, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
