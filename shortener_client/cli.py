"""
Command-line interface for the URL shortener client.

Usage:
    shortener-client list
    shortener-client shorten <url> [--expires YYYY-MM-DD]
    shortener-client delete <link_id>
    shortener-client qr <link_id> [--output FILE]
    shortener-client copy <link_id>
    shortener-client health
"""

import argparse
import asyncio
import json
import sys
from typing import Optional, Sequence

from .config import Config, load_config
from .common.logging_config import setup_logging
from .common.url_builder import truncate_for_display
from .errors import ShortenerClientError
from .forms import shape_link_input
from .gateway.http import HttpLinkGateway
from .gateway.models import Link
from .progress import init_progress
from .store import LinkStore

EMPTY_MESSAGE = "No urls found"


def format_date(value) -> Optional[str]:
    """Format a timestamp as MM/DD/YYYY, or None when absent."""
    if value is None:
        return None
    return value.strftime("%m/%d/%Y")


def describe_link(link: Link) -> dict:
    """Display fields for one link row."""
    return {
        "id": link.id,
        "shortened_url": link.shortened_url,
        "original_url": truncate_for_display(link.original_url),
        "logo": link.logo,
        "created_at": format_date(link.created_at),
        "expires_at": format_date(link.expired_in) or "never",
        "expired": link.is_expired(),
    }


class ShortenerClientCLI:
    """Command-line interface for the shortener client."""

    def __init__(self, config: Config, verbose: bool = False, transport=None):
        """Initialize CLI."""
        self.config = config
        self.verbose = verbose
        self.transport = transport
        self.logger = setup_logging(
            level="DEBUG" if verbose else config.log_level,
            log_file=config.log_file,
            json_format=config.log_json,
        )
        self.store: Optional[LinkStore] = None

    async def initialize(self):
        """Create the gateway and the link store."""
        self.logger.debug(f"Using backend {self.config.backend_url}")

        progress = init_progress(
            start_step=self.config.progress_start_step,
            finish_step=self.config.progress_finish_step,
        )
        gateway = HttpLinkGateway.from_config(self.config, transport=self.transport)
        self.store = LinkStore.from_config(self.config, gateway=gateway, progress=progress)

    async def cleanup(self):
        """Cleanup resources."""
        if self.store:
            await self.store.close()

    async def list_links(self):
        """List the user's links."""
        try:
            links = await self.store.refresh()
        except ShortenerClientError as e:
            return self._fail(e)

        result = {
            "success": True,
            "count": len(links),
            "urls": [describe_link(link) for link in links],
        }
        if not links:
            result["message"] = EMPTY_MESSAGE
        return self._ok(result)

    async def shorten(self, url: str, expires: Optional[str] = None):
        """Shorten a URL."""
        try:
            original_url, expired_in = shape_link_input(url, expires)
            link = await self.store.create_link(original_url, expired_in)
        except ShortenerClientError as e:
            return self._fail(e)

        return self._ok({
            "success": True,
            "url": describe_link(link),
            "message": f"Successfully shortened URL to: {link.shortened_url}",
        })

    async def delete(self, link_id: str):
        """Delete a link."""
        try:
            await self.store.delete_link(link_id)
        except ShortenerClientError as e:
            return self._fail(e)

        return self._ok({"success": True, "id": link_id, "message": f"Deleted link '{link_id}'"})

    async def qr(self, link_id: str, output: Optional[str] = None):
        """Fetch the QR code for a link."""
        try:
            image = await self.store.get_qr_code(link_id)
        except ShortenerClientError as e:
            return self._fail(e)

        result = {"success": True, "id": link_id, "content_type": image.content_type}
        if output:
            with open(output, "wb") as f:
                f.write(image.data)
            result["output"] = output
        else:
            result["data_url"] = image.to_data_url()
        return self._ok(result)

    async def copy(self, link_id: str):
        """Print a link's shortened URL."""
        try:
            await self.store.refresh()
        except ShortenerClientError as e:
            return self._fail(e)

        link = self.store.get_link(link_id)
        if link is None:
            return self._fail(f"Link '{link_id}' not found")
        print(link.shortened_url)
        return 0

    async def health(self):
        """Check backend reachability."""
        healthy = await self.store.gateway.health_check()
        self._ok({"success": healthy, "backend": self.config.backend_url})
        return 0 if healthy else 1

    def _ok(self, payload: dict) -> int:
        print(json.dumps(payload, indent=2))
        return 0

    def _fail(self, error) -> int:
        self.logger.debug(f"Command failed: {error!r}")
        print(json.dumps({
            "success": False,
            "error": str(error),
        }, indent=2), file=sys.stderr)
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shortener-client",
        description="URL shortener client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List your links
  %(prog)s list

  # Shorten a URL that expires at the end of January
  %(prog)s shorten https://example.com/long/url --expires 2030-01-31

  # Save a QR code
  %(prog)s qr 65f1c0ffee --output link.png
        """
    )

    parser.add_argument(
        "--backend-url",
        default=None,
        help="Backend base URL (default: from BACKEND_URL env or http://localhost:8000/api/v1)"
    )

    parser.add_argument(
        "--token",
        default=None,
        help="Session token (default: from ACCESS_TOKEN env)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser("list", help="List your links")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--expires", help="Expiration date (YYYY-MM-DD)")

    delete_parser = subparsers.add_parser("delete", help="Delete a link")
    delete_parser.add_argument("link_id", help="Link id")

    qr_parser = subparsers.add_parser("qr", help="Get a link's QR code")
    qr_parser.add_argument("link_id", help="Link id")
    qr_parser.add_argument("--output", help="Write the image to this file")

    copy_parser = subparsers.add_parser("copy", help="Print a link's shortened URL")
    copy_parser.add_argument("link_id", help="Link id")

    subparsers.add_parser("health", help="Check backend reachability")

    return parser


async def run(argv: Optional[Sequence[str]] = None) -> int:
    """Parse arguments and execute one command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config = load_config(backend_url=args.backend_url, access_token=args.token)
    cli = ShortenerClientCLI(config, verbose=args.verbose)

    try:
        await cli.initialize()

        if args.command == "list":
            return await cli.list_links()
        elif args.command == "shorten":
            return await cli.shorten(args.url, args.expires)
        elif args.command == "delete":
            return await cli.delete(args.link_id)
        elif args.command == "qr":
            return await cli.qr(args.link_id, args.output)
        elif args.command == "copy":
            return await cli.copy(args.link_id)
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    finally:
        await cli.cleanup()


def main() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
