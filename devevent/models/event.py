"""
Event MongoDB Schema

Defines the Event document model for the 'events' collection.

Schema Fields:
- _id: ObjectId
- title, description, overview, venue, location, audience, organizer: trimmed text
- slug: URL slug derived from title (unique)
- image: image URL
- date: ISO date string (e.g., "2024-03-05")
- time: 24-hour "HH:mm"
- mode: "online" | "offline" | "hybrid"
- agenda, tags: non-empty lists of strings
- createdAt, updatedAt: Timestamps

Indexes:
- slug (unique)

Field rules live in devevent.rules.events and run in the repository
before every write.
"""

from enum import Enum

from pymongo import ASCENDING, IndexModel

from devevent.models.base import BaseDocument


class EventMode(str, Enum):
    """How attendees take part in an event."""

    ONLINE = "online"
    OFFLINE = "offline"
    HYBRID = "hybrid"


class Event(BaseDocument):
    """A scheduled developer event."""

    title: str
    slug: str = ""
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: EventMode
    audience: str
    agenda: list[str]
    organizer: str
    tags: list[str]

    class Settings:
        name = "events"
        indexes = [
            IndexModel([("slug", ASCENDING)], name="slug_unique", unique=True),
        ]
