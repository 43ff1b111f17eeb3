"""Shared fixtures: repositories over an in-memory MongoDB."""

import pytest
from beanie import init_beanie
from mongomock_motor import AsyncMongoMockClient

from devevent.config import Settings
from devevent.database import ConnectionCache
from devevent.models import get_document_models
from devevent.repositories import BookingRepository, EventRepository


async def mongomock_connector(settings: Settings):
    client = AsyncMongoMockClient(tz_aware=True)
    database = client[settings.mongodb_database]
    await init_beanie(database=database, document_models=get_document_models())
    return database


@pytest.fixture
def settings() -> Settings:
    return Settings(
        mongodb_uri="mongodb://localhost:27017/devevent_test",
        mongodb_database="devevent_test",
        _env_file=None,
    )


@pytest.fixture
def connection(settings) -> ConnectionCache:
    return ConnectionCache(settings, connector=mongomock_connector)


@pytest.fixture
def events(connection) -> EventRepository:
    return EventRepository(connection)


@pytest.fixture
def bookings(connection, events) -> BookingRepository:
    return BookingRepository(connection, events)


@pytest.fixture
def event_payload() -> dict:
    return {
        "title": "My Cool Event! @2024",
        "description": "A day of talks about the web platform.",
        "overview": "Keynotes, workshops and networking.",
        "image": "https://example.com/cool-event.png",
        "venue": "Main Hall",
        "location": "Berlin, Germany",
        "date": "2024-03-05T10:00:00Z",
        "time": "10:00",
        "mode": "offline",
        "audience": "Frontend developers",
        "agenda": ["Doors open", "Keynote", "Workshops"],
        "organizer": "Web Berlin",
        "tags": ["web", "javascript"],
    }
