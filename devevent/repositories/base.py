"""
BaseRepository

Base class for the MongoDB repositories. Every write goes through here:

1. Acquire the shared connection.
2. Map input keys (attribute names or stored aliases) to fields, dropping
   unknown and system-managed keys.
3. Work out which fields the write changes.
4. Run the subclass's record rules; the first failure aborts the write.
5. Insert or save, translating unique-index violations.

Subclasses set document_model and implement normalize() and apply_rules().
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Generic, TypeVar

from beanie import PydanticObjectId
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from devevent.database.connection import ConnectionCache
from devevent.exceptions import DuplicateRecordError, RecordError
from devevent.models.base import BaseDocument

logger = logging.getLogger(__name__)

DocumentT = TypeVar("DocumentT", bound=BaseDocument)

# Never taken from caller input
SYSTEM_FIELDS = frozenset({"id", "revision_id", "created_at", "updated_at"})


def as_object_id(value: Any) -> PydanticObjectId | None:
    """Parse an id, returning None when it cannot name any document."""
    if isinstance(value, ObjectId):
        return PydanticObjectId(value)
    if isinstance(value, str) and ObjectId.is_valid(value):
        return PydanticObjectId(value)
    return None


class BaseRepository(Generic[DocumentT]):
    """Common CRUD operations over one Beanie document model."""

    document_model: type[DocumentT]

    def __init__(self, connection: ConnectionCache):
        self.connection = connection

    @property
    def collection_name(self) -> str:
        return self.document_model.Settings.name

    def writable_fields(self) -> list[str]:
        return [
            name for name in self.document_model.model_fields if name not in SYSTEM_FIELDS
        ]

    def input_fields(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Map input keys to field names, dropping unknown and system keys."""
        writable = set(self.writable_fields())
        by_alias = {
            info.alias: name
            for name, info in self.document_model.model_fields.items()
            if info.alias
        }

        fields: dict[str, Any] = {}
        for key, value in data.items():
            name = by_alias.get(key, key)
            if name in writable:
                fields[name] = value
        return fields

    def normalize(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """Field setters applied before change detection."""
        raise NotImplementedError

    async def apply_rules(
        self, values: dict[str, Any], changed: set[str]
    ) -> dict[str, Any]:
        """Run record rules; return values to write or raise RecordError."""
        raise NotImplementedError

    async def _checked(self, values: dict[str, Any], changed: set[str]) -> dict[str, Any]:
        try:
            return await self.apply_rules(values, changed)
        except RecordError as e:
            logger.info(f"Rejected write to {self.collection_name}: {e.message}")
            raise

    async def _write(self, operation: Callable[[], Awaitable[Any]]) -> None:
        try:
            await operation()
        except DuplicateKeyError as e:
            key_value = (e.details or {}).get("keyValue") or {}
            field = next(iter(key_value), None)
            logger.info(f"Duplicate key in {self.collection_name}: {key_value or e}")
            raise DuplicateRecordError(
                f"duplicate key in {self.collection_name}: {key_value or e}",
                field=field,
            ) from e

    async def create(self, data: Mapping[str, Any]) -> DocumentT:
        """Validate and insert a new document."""
        await self.connection.acquire_connection()

        fields = self.input_fields(data)
        values = await self._checked(fields, changed=set(fields))

        document = self.document_model(**values)
        await self._write(document.insert)
        logger.info(f"Created {self.collection_name} document {document.id}")
        return document

    async def update(
        self, document_id: Any, updates: Mapping[str, Any]
    ) -> DocumentT | None:
        """
        Apply updates to a stored document.

        Rules run for the fields whose normalized value differs from the
        stored one. Returns None when no document has that id.
        """
        document = await self.find_by_id(document_id)
        if document is None:
            return None

        current = document.model_dump(include=set(self.writable_fields()))
        incoming = self.normalize(self.input_fields(updates))
        changed = {k for k, v in incoming.items() if current.get(k) != v}
        if not changed:
            return document

        values = await self._checked({**current, **incoming}, changed)
        for name, value in values.items():
            setattr(document, name, value)

        await self._write(document.save)
        logger.info(
            f"Updated {self.collection_name} document {document.id}: "
            f"{', '.join(sorted(changed))}"
        )
        return document

    async def find_by_id(self, document_id: Any) -> DocumentT | None:
        await self.connection.acquire_connection()
        object_id = as_object_id(document_id)
        if object_id is None:
            return None
        return await self.document_model.get(object_id)

    async def exists(self, document_id: Any) -> bool:
        await self.connection.acquire_connection()
        object_id = as_object_id(document_id)
        if object_id is None:
            return False
        return await self.document_model.find_one({"_id": object_id}) is not None

    async def find_many(
        self,
        filters: Mapping[str, Any] | None = None,
        limit: int = 100,
        skip: int = 0,
    ) -> list[DocumentT]:
        """Documents matching a raw filter, newest first."""
        await self.connection.acquire_connection()
        return (
            await self.document_model.find(dict(filters or {}))
            .sort("-createdAt")
            .skip(skip)
            .limit(limit)
            .to_list()
        )

    async def delete(self, document_id: Any) -> bool:
        """Delete a document. No cascade to referencing documents."""
        document = await self.find_by_id(document_id)
        if document is None:
            return False
        await document.delete()
        logger.info(f"Deleted {self.collection_name} document {document.id}")
        return True
