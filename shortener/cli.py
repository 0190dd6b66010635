"""
Command-line interface for URL shortener service.

Usage:
    shortener-cli shorten <url> [--validity MINUTES] [--shortcode CODE]
    shortener-cli resolve <short_code>
    shortener-cli stats [--limit N] [--offset N] [--sort-by FIELD] [--order asc|desc]
    shortener-cli init-db
    shortener-cli health
"""

import argparse
import asyncio
import json
import os
import sys
from typing import List, Optional

from .common.logging_config import setup_logging
from .components import Components, build_components
from .config import Config
from .exceptions import ShortenerError


class URLShortenerCLI:
    """Command-line interface for URL shortener."""

    def __init__(self, db_url: str, base_url: str, verbose: bool = False):
        """Initialize CLI."""
        self.config = Config(database_url=db_url, base_url=base_url)
        # stdout carries the JSON results
        self.logger = setup_logging(level="DEBUG" if verbose else "ERROR", stream=sys.stderr)
        self.components: Optional[Components] = None

    def initialize(self, components: Optional[Components] = None) -> None:
        """Build store and services (remote logging stays off for the CLI)."""
        self.components = components or build_components(
            self.config.model_copy(update={"remote_log_url": None})
        )

    async def cleanup(self) -> None:
        if self.components:
            await self.components.close()

    @staticmethod
    def _print(payload: dict, error: bool = False) -> int:
        print(json.dumps(payload, indent=2), file=sys.stderr if error else sys.stdout)
        return 1 if error else 0

    async def shorten(self, url: str, validity: Optional[str] = None, shortcode: Optional[str] = None) -> int:
        """Shorten a URL."""
        result = await self.components.shortcode_service.create_short_url(
            long_url=url,
            validity=validity,
            custom_code=shortcode,
        )
        return self._print({"shortlink": result.shortlink, "expiry": result.expiry})

    async def resolve(self, short_code: str) -> int:
        """Resolve a short code; the lookup is recorded as a click from the CLI."""
        long_url = await self.components.redirect_service.resolve(short_code, user_agent="cli")
        return self._print({"shortCode": short_code, "longUrl": long_url})

    async def stats(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        sort_by: Optional[str] = None,
        order: Optional[str] = None,
    ) -> int:
        """List statistics."""
        page = await self.components.stats_service.list_stats(
            limit=limit,
            offset=offset,
            sort_by=sort_by,
            order=order,
        )
        return self._print({
            "data": [record.to_dict() for record in page.records],
            "meta": page.meta,
        })

    async def init_db(self) -> int:
        """Create store indexes and check the store answers."""
        await self.components.store.ensure_indexes()
        healthy = await self.components.store.health_check()
        return self._print({"indexes": "ensured", "healthy": healthy}, error=not healthy)

    async def health(self) -> int:
        """Check store health."""
        healthy = await self.components.store.health_check()
        return self._print({"database": "healthy" if healthy else "unhealthy"}, error=not healthy)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shortener-cli",
        description="URL Shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL, valid for two hours
  %(prog)s shorten https://example.com/long/url --validity 120

  # Shorten with custom code
  %(prog)s shorten https://example.com/long/url --shortcode mylink

  # Resolve a short code
  %(prog)s resolve mylink

  # Oldest ten URLs
  %(prog)s stats --limit 10 --order asc
        """
    )

    parser.add_argument(
        "--db-url",
        default=os.getenv("DATABASE_URL"),
        help="Store connection URL (default: from DATABASE_URL env)"
    )
    parser.add_argument(
        "--base-url",
        default=os.getenv("BASE_URL") or os.getenv("APP_URL") or "http://localhost:8000",
        help="Base URL for printed shortlinks"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--validity", help="Validity in minutes (default 30)")
    shorten_parser.add_argument("--shortcode", help="Custom short code")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a short code")
    resolve_parser.add_argument("short_code", help="Short code to resolve")

    stats_parser = subparsers.add_parser("stats", help="List URL statistics")
    stats_parser.add_argument("--limit", type=int, help="Page size (default 50, max 1000)")
    stats_parser.add_argument("--offset", type=int, help="Records to skip")
    stats_parser.add_argument("--sort-by", help="createdAt, expiresAt, shortCode or longUrl")
    stats_parser.add_argument("--order", choices=["asc", "desc"], help="Sort order")

    subparsers.add_parser("init-db", help="Create store indexes")
    subparsers.add_parser("health", help="Check store health")

    return parser


async def main(argv: Optional[List[str]] = None, components: Optional[Components] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if not args.db_url and components is None:
        print("A store URL is required: pass --db-url or set DATABASE_URL", file=sys.stderr)
        return 1

    cli = URLShortenerCLI(
        db_url=args.db_url or "memory://",
        base_url=args.base_url,
        verbose=args.verbose,
    )

    try:
        try:
            cli.initialize(components)
        except ValueError as e:
            return cli._print({"success": False, "error": str(e)}, error=True)

        if args.command == "shorten":
            return await cli.shorten(args.url, args.validity, args.shortcode)
        elif args.command == "resolve":
            return await cli.resolve(args.short_code)
        elif args.command == "stats":
            return await cli.stats(args.limit, args.offset, args.sort_by, args.order)
        elif args.command == "init-db":
            return await cli.init_db()
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    except ShortenerError as e:
        return cli._print({"success": False, "error": e.message}, error=True)

    finally:
        await cli.cleanup()


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
