"""
BookingRepository

MongoDB operations for the 'bookings' collection.

Specialized Methods:
- get_by_event(event_id): All bookings for one event
- count_for_event(event_id): Number of bookings for one event

Writes that set or change eventId check the event exists first. The check
and the write are not in a transaction.
"""

from collections.abc import Mapping
from typing import Any

from devevent.database.connection import ConnectionCache
from devevent.models.booking import Booking
from devevent.repositories.base import BaseRepository, as_object_id
from devevent.repositories.events import EventRepository
from devevent.rules.bookings import (
    apply_booking_rules,
    check_event_reference,
    normalize_booking_fields,
)


class BookingRepository(BaseRepository[Booking]):
    """Bookings with email normalization and event reference checks."""

    document_model = Booking

    def __init__(
        self,
        connection: ConnectionCache,
        events: EventRepository | None = None,
    ):
        super().__init__(connection)
        self.events = events or EventRepository(connection)

    def normalize(self, values: Mapping[str, Any]) -> dict[str, Any]:
        return normalize_booking_fields(values)

    async def apply_rules(
        self, values: dict[str, Any], changed: set[str]
    ) -> dict[str, Any]:
        values = apply_booking_rules(values).unwrap()
        result = await check_event_reference(values, changed, self.events.exists)
        return result.unwrap()

    async def get_by_event(self, event_id: Any) -> list[Booking]:
        await self.connection.acquire_connection()
        object_id = as_object_id(event_id)
        if object_id is None:
            return []
        return await Booking.find({"eventId": object_id}).sort("-createdAt").to_list()

    async def count_for_event(self, event_id: Any) -> int:
        await self.connection.acquire_connection()
        object_id = as_object_id(event_id)
        if object_id is None:
            return 0
        return await Booking.find({"eventId": object_id}).count()
