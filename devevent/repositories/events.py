"""
EventRepository

MongoDB operations for the 'events' collection.

Specialized Methods:
- get_by_slug(slug): Event page lookup by URL slug
"""

from collections.abc import Mapping
from typing import Any

from devevent.models.event import Event
from devevent.repositories.base import BaseRepository
from devevent.rules.events import apply_event_rules, normalize_event_fields


class EventRepository(BaseRepository[Event]):
    """Events with slug, date and time rules applied on every write."""

    document_model = Event

    def normalize(self, values: Mapping[str, Any]) -> dict[str, Any]:
        return normalize_event_fields(values)

    async def apply_rules(
        self, values: dict[str, Any], changed: set[str]
    ) -> dict[str, Any]:
        return apply_event_rules(values, changed).unwrap()

    async def get_by_slug(self, slug: str) -> Event | None:
        await self.connection.acquire_connection()
        return await Event.find_one({"slug": slug})
