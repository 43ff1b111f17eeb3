"""
Booking record rules.

apply_booking_rules() covers the checks that need no database round trip:
event id presence and format, email trim/lowercase and pattern.
check_event_reference() confirms the referenced event exists whenever the
event id changes, including on creation.

The reference check and the insert that follows are separate operations. An
event deleted between the two leaves a booking pointing at nothing; callers
accept that race.
"""

import logging
import re
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from beanie import PydanticObjectId
from bson import ObjectId

from devevent.exceptions import (
    RecordError,
    ReferenceNotFoundError,
    ValidationFailedError,
)
from devevent.rules.results import RuleResult

logger = logging.getLogger(__name__)

BOOKING_FIELDS = ("event_id", "email")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

EventExists = Callable[[PydanticObjectId], Awaitable[bool]]


def normalize_email(value: str) -> str:
    return value.strip().lower()


def parse_event_id(value: Any) -> PydanticObjectId:
    """Coerce an ObjectId or its hex string to PydanticObjectId."""
    if value is None or value == "":
        raise ValidationFailedError("Event ID is required", field="event_id")
    if isinstance(value, ObjectId):
        return PydanticObjectId(value)
    if isinstance(value, str) and ObjectId.is_valid(value):
        return PydanticObjectId(value)
    raise ValidationFailedError("Event ID is not a valid ObjectId", field="event_id")


def normalize_booking_fields(values: Mapping[str, Any]) -> dict[str, Any]:
    """Apply field setters: lowercase/trim email, parse well-formed event ids."""
    normalized = dict(values)
    if isinstance(normalized.get("email"), str):
        normalized["email"] = normalize_email(normalized["email"])
    event_id = normalized.get("event_id")
    if isinstance(event_id, str) and ObjectId.is_valid(event_id):
        normalized["event_id"] = PydanticObjectId(event_id)
    return normalized


def validate_email(value: Any) -> str:
    if value is None or value == "":
        raise ValidationFailedError("Email is required", field="email")
    if not isinstance(value, str):
        raise ValidationFailedError("email must be a string", field="email")
    if EMAIL_PATTERN.fullmatch(value) is None:
        raise ValidationFailedError("Please enter a valid email address", field="email")
    return value


def apply_booking_rules(record: Mapping[str, Any]) -> RuleResult:
    """Validate and normalize a booking about to be written.

    Args:
        record: Full field values of the booking after the pending change
    """
    values = normalize_booking_fields(
        {k: record[k] for k in BOOKING_FIELDS if k in record}
    )

    try:
        values["event_id"] = parse_event_id(values.get("event_id"))
        values["email"] = validate_email(values.get("email"))
    except RecordError as e:
        logger.debug(f"Booking rejected on {e.field}: {e.message}")
        return RuleResult.failure(e)

    return RuleResult.success(values)


async def check_event_reference(
    values: Mapping[str, Any],
    changed: Iterable[str],
    event_exists: EventExists,
) -> RuleResult:
    """Fail the write when a changed event id matches no stored event."""
    if "event_id" not in set(changed):
        return RuleResult.success(dict(values))

    event_id = values["event_id"]
    if not await event_exists(event_id):
        logger.info(f"Booking references missing event {event_id}")
        return RuleResult.failure(
            ReferenceNotFoundError("event does not exist", field="event_id")
        )

    return RuleResult.success(dict(values))
