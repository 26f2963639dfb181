"""
Command-line interface for tinylink.

Works against the store selected by the environment (STORE_BACKEND,
DATABASE_URL, REDIS_URL); the memory backend only lives for one command.

Usage:
    tinylink-cli create <target> <code>
    tinylink-cli get <code>
    tinylink-cli click <code>
    tinylink-cli delete <code>
    tinylink-cli list [--filter TEXT]
    tinylink-cli health
"""

import argparse
import asyncio
import json
import sys
from typing import Optional, List

from .config import Config, load_config
from .registry import LinkRegistry
from .stores import build_store
from .errors import RegistryError
from .common.logging_config import setup_logging


class TinylinkCLI:
    """Command-line interface for the link registry."""

    def __init__(self, config: Config, verbose: bool = False):
        """Initialize CLI."""
        self.config = config
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.store = build_store(config, logger=self.logger)
        self.registry = LinkRegistry(
            store=self.store,
            logger=self.logger,
            max_target_length=config.max_target_length,
        )

    async def cleanup(self):
        """Cleanup resources."""
        await self.store.close()

    def _print(self, payload: dict, stream=None):
        print(json.dumps(payload, indent=2), file=stream or sys.stdout)

    async def create(self, target: str, code: str) -> int:
        link = await self.registry.create_link(target, code)
        self._print({"success": True, "link": link.to_dict()})
        return 0

    async def get(self, code: str) -> int:
        link = await self.registry.get_link(code)
        self._print({"success": True, "link": link.to_dict()})
        return 0

    async def click(self, code: str) -> int:
        link = await self.registry.resolve_and_record_click(code)
        self._print({"success": True, "target": link.target, "link": link.to_dict()})
        return 0

    async def delete(self, code: str) -> int:
        await self.registry.delete_link(code)
        self._print({"success": True, "code": code})
        return 0

    async def list(self, filter_text: Optional[str] = None) -> int:
        listing = await self.registry.list_links(filter_text)
        links = [link.to_dict() for link in listing]
        self._print({"success": True, "count": len(links), "links": links})
        return 0

    async def health(self) -> int:
        healthy = await self.store.health_check()
        self._print({"success": healthy, "store": "healthy" if healthy else "unhealthy"})
        return 0 if healthy else 1

    async def run(self, args: argparse.Namespace) -> int:
        """Dispatch a parsed command; registry errors become exit code 1."""
        try:
            if args.command == "create":
                return await self.create(args.target, args.code)
            if args.command == "get":
                return await self.get(args.code)
            if args.command == "click":
                return await self.click(args.code)
            if args.command == "delete":
                return await self.delete(args.code)
            if args.command == "list":
                return await self.list(args.filter)
            return await self.health()
        except RegistryError as e:
            self._print({"success": False, "error": e.message}, stream=sys.stderr)
            return 1
        finally:
            await self.cleanup()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tinylink-cli",
        description="Manage tinylink short links",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    create_parser = subparsers.add_parser("create", help="Create a short link")
    create_parser.add_argument("target", help="URL to redirect to")
    create_parser.add_argument("code", help="Short code (6-8 letters or digits)")

    for name, help_text in (
        ("get", "Show a link"),
        ("click", "Record a click and print the target"),
        ("delete", "Delete a link"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("code", help="Short code")

    list_parser = subparsers.add_parser("list", help="List links, newest first")
    list_parser.add_argument("--filter", "-f", default=None, help="Case-insensitive code/target filter")

    subparsers.add_parser("health", help="Check store health")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    cli = TinylinkCLI(load_config(), verbose=args.verbose)
    return asyncio.run(cli.run(args))


if __name__ == "__main__":
    sys.exit(main())
