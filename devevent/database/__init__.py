"""
Database module initialization.
Exports connection components for use throughout the application.
"""

from devevent.database.connection import (
    ConnectionCache,
    ConnectionState,
    Connector,
    acquire_connection,
    connect_mongodb,
    get_connection_cache,
    sanitize_mongodb_url,
)

__all__ = [
    # Connection management
    "ConnectionCache",
    "ConnectionState",
    "Connector",
    "connect_mongodb",
    # Process-wide cache
    "get_connection_cache",
    "acquire_connection",
    # Utilities
    "sanitize_mongodb_url",
]
