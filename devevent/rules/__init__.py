"""Record rules run by the repositories before each insert/update."""

from .bookings import (
    apply_booking_rules,
    check_event_reference,
    normalize_booking_fields,
    normalize_email,
)
from .events import (
    apply_event_rules,
    normalize_date,
    normalize_event_fields,
    slugify,
    validate_time,
)
from .results import RuleResult

__all__ = [
    "RuleResult",
    "apply_event_rules",
    "normalize_event_fields",
    "slugify",
    "normalize_date",
    "validate_time",
    "apply_booking_rules",
    "check_event_reference",
    "normalize_booking_fields",
    "normalize_email",
]
