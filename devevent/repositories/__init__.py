"""
Repository Pattern for MongoDB

Explicit write path for the document models: every create/update acquires
the shared connection and runs the record rules before touching the
database.

Repositories:
- BaseRepository: Common CRUD operations
- EventRepository: Event writes and slug lookup
- BookingRepository: Booking writes with event reference checks
"""

from devevent.repositories.base import BaseRepository
from devevent.repositories.bookings import BookingRepository
from devevent.repositories.events import EventRepository

__all__ = ["BaseRepository", "BookingRepository", "EventRepository"]
