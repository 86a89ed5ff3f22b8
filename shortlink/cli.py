"""
Command-line interface for the link service.

Usage:
    shortlink create <url> [--custom-id ID] [--host HOST]
    shortlink get <link_id>
    shortlink list
    shortlink health
    shortlink init-db
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from config import load_config

from .common.logging_config import setup_logging
from .database import create_store
from .errors import InternalError, LinkError
from .identifier import IdentifierCodec
from .service import LinkService


class LinkCLI:
    """Command-line interface for the link service."""

    def __init__(self, config, backend: Optional[str] = None, verbose: bool = False):
        """Initialize CLI."""
        self.config = config
        self.backend = backend or config.storage_backend
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.store = None
        self.service = None

    async def initialize(self):
        """Initialize store and service."""
        self.store = create_store(self.config, logger=self.logger, backend=self.backend)
        try:
            await self.store.connect()
        except Exception as e:
            raise InternalError(f"could not open the {self.backend} store: {e}") from e

        self.service = LinkService(
            store=self.store,
            codec=IdentifierCodec(length=self.config.id_length),
            logger=self.logger,
        )
        self.logger.debug(f"Initialized {self.store.backend_name} store")

    async def cleanup(self):
        """Cleanup resources."""
        if self.service:
            await self.service.close()

    async def create(self, url: str, custom_id: Optional[str] = None, host: str = "") -> int:
        """Create a link."""
        link = await self.service.create(url, custom_id=custom_id, request_host=host)
        _print_json(link.to_dict())
        return 0

    async def get(self, link_id: str) -> int:
        """Show a link without counting a redirect."""
        link = await self.service.get(link_id)
        _print_json(link.to_dict())
        return 0

    async def list_links(self) -> int:
        links = await self.service.list_links()
        _print_json([link.to_dict() for link in links])
        return 0

    async def health(self) -> int:
        healthy = await self.service.health_check()
        _print_json({"healthy": healthy, "backend": self.store.backend_name})
        return 0 if healthy else 1

    async def init_db(self) -> int:
        """Create the links table on the configured database."""
        ensure_schema = getattr(self.store, "ensure_schema", None)
        if ensure_schema is None:
            _print_json({"message": f"Nothing to initialize for the {self.store.backend_name} backend"})
            return 0

        await ensure_schema()
        _print_json({"message": "Links table ready"})
        return 0


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2))


def _print_error(message: str) -> None:
    print(json.dumps({"message": message}, indent=2), file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shortlink",
        description="Link shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s create https://example.com/long/url

  # Shorten with a custom ID
  %(prog)s create https://example.com/long/url --custom-id mylink

  # Show a link
  %(prog)s get mylink

  # Create the links table
  %(prog)s --database-url postgresql://localhost/shortlink init-db
        """
    )

    parser.add_argument(
        "--backend",
        choices=["postgres", "memory"],
        help="Storage backend (default: from STORAGE_BACKEND env or postgres)"
    )

    parser.add_argument(
        "--database-url",
        help="PostgreSQL connection URL (default: from DATABASE_URL env)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    create_parser = subparsers.add_parser("create", help="Create a short link")
    create_parser.add_argument("url", help="Target URL")
    create_parser.add_argument("--custom-id", help="Custom link ID")
    create_parser.add_argument(
        "--host",
        default="",
        help="Host the service is reachable at; targets on this host are refused"
    )

    get_parser = subparsers.add_parser("get", help="Show a link")
    get_parser.add_argument("link_id", help="Link ID to look up")

    subparsers.add_parser("list", help="List all links")
    subparsers.add_parser("health", help="Check store health")
    subparsers.add_parser("init-db", help="Create the links table")

    return parser


async def run(args: argparse.Namespace, config) -> int:
    """Execute a parsed command."""
    cli = LinkCLI(config, backend=args.backend, verbose=args.verbose)

    try:
        await cli.initialize()

        if args.command == "create":
            return await cli.create(args.url, args.custom_id, args.host)
        elif args.command == "get":
            return await cli.get(args.link_id)
        elif args.command == "list":
            return await cli.list_links()
        elif args.command == "health":
            return await cli.health()
        elif args.command == "init-db":
            return await cli.init_db()
        return 1

    except InternalError as e:
        cli.logger.error(f"Internal error: {e.detail}")
        _print_error(e.message)
        return 1
    except LinkError as e:
        _print_error(e.message)
        return 1
    finally:
        await cli.cleanup()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config = load_config()
    if args.database_url:
        config.database_url = args.database_url

    return asyncio.run(run(args, config))


if __name__ == "__main__":
    sys.exit(main())
