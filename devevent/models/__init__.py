"""
MongoDB ODM Models Package

Collections:
- events: Developer events listed on the site
- bookings: Attendee bookings referencing events
"""

from beanie import Document

from devevent.models.base import BaseDocument
from devevent.models.booking import Booking
from devevent.models.event import Event, EventMode


def get_document_models() -> list[type[Document]]:
    """Document models registered with Beanie on connect."""
    return [Event, Booking]


__all__ = [
    "BaseDocument",
    "Booking",
    "Event",
    "EventMode",
    "get_document_models",
]
