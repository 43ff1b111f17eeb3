"""
Event record rules.

Run by EventRepository immediately before every insert/update, in a fixed
order:

1. Trim text fields, then check required fields, types, the mode enum and
   non-empty agenda/tags lists (declaration order, first failure wins).
2. Derive slug from title when title changed or slug is empty.
3. Normalize date to YYYY-MM-DD when date changed.
4. Check time against 24-hour HH:mm when time changed.

Slug uniqueness is enforced by the unique index on the events collection,
not here.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from devevent.exceptions import (
    NormalizationFailedError,
    RecordError,
    ValidationFailedError,
)
from devevent.models.event import EventMode
from devevent.rules.results import RuleResult

logger = logging.getLogger(__name__)

# Writable fields in declaration order
EVENT_FIELDS = (
    "title",
    "slug",
    "description",
    "overview",
    "image",
    "venue",
    "location",
    "date",
    "time",
    "mode",
    "audience",
    "agenda",
    "organizer",
    "tags",
)

TRIMMED_FIELDS = frozenset(
    {"title", "description", "overview", "venue", "location", "audience", "organizer"}
)
LIST_FIELDS = frozenset({"agenda", "tags"})

REQUIRED_MESSAGES = {
    "title": "Title is required",
    "description": "Description is required",
    "overview": "Overview is required",
    "image": "Image URL is required",
    "venue": "Venue is required",
    "location": "Location is required",
    "date": "Date is required",
    "time": "Time is required",
    "mode": "Mode is required",
    "audience": "Target audience is required",
    "agenda": "Agenda items are required",
    "organizer": "Organizer is required",
    "tags": "Tags are required",
}

EMPTY_LIST_MESSAGES = {
    "agenda": "At least one agenda item is required",
    "tags": "At least one tag is required",
}

_NON_SLUG_CHARS = re.compile(r"[^A-Za-z0-9_\s-]")
_WHITESPACE_RUN = re.compile(r"\s+")
_HYPHEN_RUN = re.compile(r"-+")

TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")

# Non-ISO layouts accepted for event dates, tried in order
_DATE_FORMATS = (
    "%Y-%m-%d",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%m/%d/%Y",
    "%Y/%m/%d",
)


def slugify(title: str) -> str:
    """Build a URL slug from an event title.

    >>> slugify("My Cool Event! @2024")
    'my-cool-event-2024'
    """
    slug = title.lower()
    slug = _NON_SLUG_CHARS.sub("", slug)
    slug = _WHITESPACE_RUN.sub("-", slug)
    slug = _HYPHEN_RUN.sub("-", slug)
    return slug.strip("-")


def normalize_date(value: str) -> str:
    """Parse a date or datetime string and return it as YYYY-MM-DD.

    Aware datetimes are converted to UTC before the date is taken; naive
    values are read as UTC.
    """
    text = value.strip()
    parsed: datetime | None = None

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        for fmt in _DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        raise NormalizationFailedError("invalid date", field="date")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def validate_time(value: str) -> str:
    """Return value unchanged if it is a 24-hour HH:mm time."""
    if TIME_PATTERN.fullmatch(value) is None:
        raise NormalizationFailedError("time must be HH:mm", field="time")
    return value


def normalize_event_fields(values: Mapping[str, Any]) -> dict[str, Any]:
    """Apply field setters: trim text fields. Other values pass through."""
    normalized = dict(values)
    for field in TRIMMED_FIELDS.intersection(normalized):
        if isinstance(normalized[field], str):
            normalized[field] = normalized[field].strip()
    return normalized


def validate_event_fields(values: dict[str, Any]) -> None:
    """Check schema rules in declaration order; raise on the first failure.

    Coerces mode to EventMode and list fields to lists in place.
    """
    slug = values.get("slug")
    if slug is not None and not isinstance(slug, str):
        raise ValidationFailedError("slug must be a string", field="slug")

    for field in EVENT_FIELDS:
        if field == "slug":
            continue
        value = values.get(field)

        if field in LIST_FIELDS:
            if value is None:
                raise ValidationFailedError(REQUIRED_MESSAGES[field], field=field)
            if not isinstance(value, (list, tuple)) or not all(
                isinstance(item, str) for item in value
            ):
                raise ValidationFailedError(
                    f"{field} must be a list of strings", field=field
                )
            if not value:
                raise ValidationFailedError(EMPTY_LIST_MESSAGES[field], field=field)
            values[field] = list(value)
            continue

        if value is None or value == "":
            raise ValidationFailedError(REQUIRED_MESSAGES[field], field=field)

        if field == "mode":
            try:
                values[field] = EventMode(value)
            except ValueError:
                raise ValidationFailedError(
                    f"`{value}` is not a valid mode", field=field
                ) from None
        elif not isinstance(value, str):
            raise ValidationFailedError(f"{field} must be a string", field=field)


def apply_event_rules(record: Mapping[str, Any], changed: Iterable[str]) -> RuleResult:
    """Validate and normalize an event about to be written.

    Args:
        record: Full field values of the event after the pending change
        changed: Names of the fields the pending write modifies
    """
    changed = set(changed)
    values = normalize_event_fields({k: record[k] for k in EVENT_FIELDS if k in record})

    try:
        validate_event_fields(values)

        if "title" in changed or not values.get("slug"):
            values["slug"] = slugify(values["title"])

        if "date" in changed:
            values["date"] = normalize_date(values["date"])

        if "time" in changed:
            values["time"] = validate_time(values["time"])

    except RecordError as e:
        logger.debug(f"Event rejected on {e.field}: {e.message}")
        return RuleResult.failure(e)

    return RuleResult.success(values)
