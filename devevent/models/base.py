"""
Base document class for Beanie ODM.

Provides automatic created_at/updated_at timestamps, stored under the
camelCase keys the web application reads (createdAt, updatedAt).
"""

from datetime import datetime, timezone

from beanie import Document
from pydantic import ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseDocument(Document):
    """Base document class for all devevent models."""

    model_config = ConfigDict(populate_by_name=True)

    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=utc_now, alias="updatedAt")

    def touch(self) -> None:
        """Bump updated_at to the current time."""
        self.updated_at = utc_now()

    async def save(self, *args, **kwargs):
        """Override save to update updated_at timestamp."""
        self.touch()
        return await super().save(*args, **kwargs)
