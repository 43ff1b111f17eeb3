"""devevent CLI entry point."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path.cwd() / ".env")

from devevent import __version__
from devevent.config import Settings, get_settings
from devevent.database import ConnectionCache, sanitize_mongodb_url
from devevent.exceptions import ConfigurationMissingError, ConnectionFailedError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


def _init_logfire(settings: Settings) -> None:
    """Initialize Logfire if available, without failing commands."""
    from devevent.observability import initialize_logfire

    initialize_logfire(settings)


def cmd_config(args: argparse.Namespace) -> int:
    """Display effective configuration."""
    settings = get_settings()

    print("\n=== devevent Configuration ===\n")
    print(f"Environment: {settings.environment}")
    print(f"Log Level: {settings.log_level}\n")

    print("MongoDB:")
    if settings.mongodb_uri:
        print(f"  URI: {sanitize_mongodb_url(settings.mongodb_uri)}")
    else:
        print("  URI: ✗ Not set (MONGODB_URI)")
    print(f"  Default Database: {settings.mongodb_database}")
    print(f"  Timeout: {settings.mongodb_timeout_ms}ms\n")

    print(f"Logfire: {'✓ Set' if settings.logfire_token else '✗ Not set'}\n")
    return 0


async def _check(cache: ConnectionCache) -> bool:
    try:
        await cache.acquire_connection()
        return await cache.ping()
    finally:
        info = cache.info()
        print(f"\nStatus: {info['status']} ({info['state']})")
        print(f"URL: {info['url']}")
        print(f"Database: {info['database'] or '-'}\n")
        await cache.close()


def cmd_check(args: argparse.Namespace) -> int:
    """Connect to MongoDB and report health."""
    settings = get_settings()
    _init_logfire(settings)

    try:
        cache = ConnectionCache(settings)
    except ConfigurationMissingError as e:
        logger.error(e.message)
        print(f"\n❌ {e.message}\n")
        return 1

    try:
        healthy = asyncio.run(_check(cache))
    except ConnectionFailedError as e:
        print(f"❌ {e.message}\n")
        return 1

    if not healthy:
        print("❌ MongoDB did not answer ping\n")
        return 1

    print("✓ MongoDB connection healthy\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devevent",
        description="devevent data-access layer tools",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    config_parser = subparsers.add_parser("config", help="Show effective configuration")
    config_parser.set_defaults(func=cmd_config)

    check_parser = subparsers.add_parser("check", help="Check the MongoDB connection")
    check_parser.set_defaults(func=cmd_check)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
