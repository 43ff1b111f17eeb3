"""
MongoDB connection cache and Beanie ODM initialization.

This module provides:
- ConnectionCache: one shared database handle per process, with concurrent
  first-time callers coalesced into a single connect attempt
- connect_mongodb(): default connector (Motor client, ping, init_beanie)
- Health check and status utilities
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from functools import lru_cache
from typing import Any

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from devevent.config import Settings, get_settings
from devevent.exceptions import ConfigurationMissingError, ConnectionFailedError
from devevent.models import get_document_models

logger = logging.getLogger(__name__)

Connector = Callable[[Settings], Awaitable[AsyncIOMotorDatabase]]


class ConnectionState(str, Enum):
    """Lifecycle of the cached connection."""

    IDLE = "idle"
    CONNECTING = "connecting"
    READY = "ready"
    FAILED = "failed"


async def connect_mongodb(settings: Settings) -> AsyncIOMotorDatabase:
    """
    Open a Motor client, verify the server answers, and initialize Beanie.

    The database named in the URI wins; settings.mongodb_database is used
    when the URI names none.
    """
    client = AsyncIOMotorClient(
        settings.mongodb_uri,
        serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
        tz_aware=True,
    )
    try:
        await client.admin.command("ping")
        database = client.get_default_database(default=settings.mongodb_database)
        await init_beanie(database=database, document_models=get_document_models())
    except Exception:
        client.close()
        raise
    return database


class ConnectionCache:
    """
    Memoized MongoDB connection.

    The cell holds nothing, an in-flight connect task, or a ready handle.
    acquire_connection() stores the task before its first await, so every
    caller arriving while it runs shares that one attempt. A failed attempt
    clears the cell and the next call starts over.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        connector: Connector | None = None,
    ):
        self.settings = settings or get_settings()

        if not self.settings.mongodb_uri:
            raise ConfigurationMissingError(
                "Please define the MONGODB_URI environment variable inside .env",
                field="mongodb_uri",
            )

        self._connector = connector or connect_mongodb
        self._database: AsyncIOMotorDatabase | None = None
        self._pending: asyncio.Task | None = None
        self._state = ConnectionState.IDLE
        self.connect_attempts = 0

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._database is not None

    async def acquire_connection(self) -> AsyncIOMotorDatabase:
        """
        Return the shared database handle, connecting on first use.

        Raises:
            ConnectionFailedError: The connect attempt this call waited on
                failed, or close() discarded it before it finished. Every
                waiter on that attempt gets the same kind of error.
        """
        if self._database is not None:
            return self._database

        if self._pending is None:
            self._state = ConnectionState.CONNECTING
            self._pending = asyncio.get_running_loop().create_task(self._connect())

        pending = self._pending
        try:
            # A cancelled waiter must not cancel the attempt other callers share
            return await asyncio.shield(pending)
        except asyncio.CancelledError:
            if not pending.cancelled():
                raise
            raise ConnectionFailedError(
                "MongoDB connection closed before it was ready"
            ) from None

    async def _connect(self) -> AsyncIOMotorDatabase:
        self.connect_attempts += 1
        logger.info(
            f"Connecting to MongoDB at {sanitize_mongodb_url(self.settings.mongodb_uri)} "
            f"(attempt {self.connect_attempts})"
        )

        try:
            database = await self._connector(self.settings)
        except Exception as e:
            self._pending = None
            self._state = ConnectionState.FAILED
            logger.error(f"MongoDB connection failed: {e}")
            if isinstance(e, ConnectionFailedError):
                raise
            raise ConnectionFailedError(f"MongoDB connection failed: {e}") from e

        self._database = database
        self._pending = None
        self._state = ConnectionState.READY
        logger.info("MongoDB connection ready")
        return database

    async def ping(self) -> bool:
        """
        Check if the cached connection is healthy.
        """
        if self._database is None:
            return False

        try:
            await self._database.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    async def close(self) -> None:
        """
        Close the client and return to the idle state.
        """
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

        if self._database is not None:
            self._database.client.close()
            self._database = None
            logger.info("Closed MongoDB connection")

        self._state = ConnectionState.IDLE

    def info(self) -> dict[str, Any]:
        """
        Get connection information and status, with credentials masked.
        """
        return {
            "status": "connected" if self._database is not None else "disconnected",
            "state": self._state.value,
            "url": sanitize_mongodb_url(self.settings.mongodb_uri),
            "database": self._database.name if self._database is not None else None,
            "environment": self.settings.environment,
            "connect_attempts": self.connect_attempts,
        }


def sanitize_mongodb_url(url: str) -> str:
    """
    Hide password in MongoDB URL for safe logging.
    """
    if "://" not in url or "@" not in url:
        return url

    # Handle mongodb+srv:// or mongodb://
    scheme, rest = url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    if ":" not in credentials:
        return url

    username = credentials.split(":", 1)[0]
    return f"{scheme}://{username}:***@{host}"


@lru_cache()
def get_connection_cache() -> ConnectionCache:
    """Get the process-wide ConnectionCache built from get_settings()."""
    return ConnectionCache(get_settings())


async def acquire_connection() -> AsyncIOMotorDatabase:
    """Acquire the process-wide shared connection."""
    return await get_connection_cache().acquire_connection()
