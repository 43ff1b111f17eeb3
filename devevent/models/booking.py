"""
Booking MongoDB Schema

Defines the Booking document model for the 'bookings' collection.

Schema Fields:
- _id: ObjectId
- eventId: Reference to the events collection (not embedded)
- email: Attendee email, trimmed and lowercased
- createdAt, updatedAt: Timestamps

Indexes:
- eventId

Deleting an event does not delete its bookings.
"""

from beanie import PydanticObjectId
from pydantic import Field
from pymongo import ASCENDING, IndexModel

from devevent.models.base import BaseDocument


class Booking(BaseDocument):
    """A seat reservation for an event."""

    event_id: PydanticObjectId = Field(alias="eventId")
    email: str

    class Settings:
        name = "bookings"
        indexes = [
            IndexModel([("eventId", ASCENDING)], name="eventId_1"),
        ]
