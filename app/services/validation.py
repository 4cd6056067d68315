"""
Validation and normalization rules applied before events and bookings are written
"""

import logging
import re
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional

from dateutil import parser as date_parser
from sqlalchemy import inspect

from app.core.errors import RecordValidationError, ReferenceCheckError, ReferenceNotFoundError
from app.models import Booking, Event

logger = logging.getLogger(__name__)

EVENT_STRING_FIELDS = (
    "title",
    "description",
    "overview",
    "image",
    "venue",
    "location",
    "date",
    "time",
    "mode",
    "audience",
    "organizer",
)

TIME_PATTERN = re.compile(r"([01]?[0-9]|2[0-3]):[0-5][0-9]")
# Deliberately permissive, not RFC 5322
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

# Any year, month and day missing from a date string is filled from these
DATE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

_SLUG_STRIP = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")

EventLookup = Callable[[int], Awaitable[Optional[Event]]]


def slugify(title: str) -> str:
    """Derive the URL slug for an event title.

    >>> slugify("React Conference 2024")
    'react-conference-2024'
    """
    slug = _SLUG_STRIP.sub("", title.lower())
    slug = _WHITESPACE.sub("-", slug.strip())
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def normalize_date(value: str) -> str:
    """Parse a human-readable date and return it as YYYY-MM-DD.

    Raises ValueError when the value is not a complete calendar date.
    Fragments such as "June" or "10" are rejected: the value is parsed
    against two different defaults and both results must agree.
    """
    try:
        first, second = (
            date_parser.parse(value, default=default).date() for default in DATE_DEFAULTS
        )
    except (ValueError, OverflowError) as exc:
        raise ValueError("Date must be a valid date string") from exc
    if first != second:
        raise ValueError("Date must be a valid date string")
    return first.isoformat()


def is_valid_time(value: str) -> bool:
    return TIME_PATTERN.fullmatch(value) is not None


def is_valid_email(value: str) -> bool:
    return EMAIL_PATTERN.fullmatch(value) is not None


def is_new_record(record) -> bool:
    state = inspect(record)
    return state.transient or state.pending


def is_modified(record, field: str) -> bool:
    return inspect(record).attrs[field].history.has_changes()


def _clean_items(items: Optional[List[Any]]) -> List[str]:
    cleaned = []
    for item in items or []:
        if item is None:
            continue
        item = str(item).strip()
        if item:
            cleaned.append(item)
    return cleaned


def normalize_event(event: Event) -> Event:
    """Trim, validate and derive fields of an event in place.

    Slug, date and time are only recomputed when the event is new or the
    source field changed, so saving an untouched event leaves them as is.
    """
    errors: Dict[str, str] = {}
    is_new = is_new_record(event)

    for field in EVENT_STRING_FIELDS:
        value = getattr(event, field)
        if isinstance(value, str):
            value = value.strip()
            if value != getattr(event, field):
                setattr(event, field, value)
        if value is None or value == "":
            errors[field] = f"{field.capitalize()} is required"

    agenda = _clean_items(event.agenda)
    if agenda != (event.agenda or []):
        event.agenda = agenda
    if not agenda:
        errors["agenda"] = "At least one agenda item is required"

    tags = _clean_items(list(event.tags))
    if tags != list(event.tags):
        event.tags = tags
    if not tags:
        errors["tags"] = "At least one tag is required"

    if "title" not in errors and (is_new or is_modified(event, "title")):
        slug = slugify(event.title)
        if not slug:
            errors["title"] = "Title must contain at least one letter or digit"
        elif slug != event.slug:
            event.slug = slug

    if "date" not in errors and (is_new or is_modified(event, "date")):
        try:
            normalized = normalize_date(event.date)
        except ValueError as exc:
            errors["date"] = str(exc)
        else:
            if normalized != event.date:
                event.date = normalized

    if "time" not in errors and (is_new or is_modified(event, "time")):
        if not is_valid_time(event.time):
            errors["time"] = "Time must be in HH:MM format (24-hour)"

    if errors:
        raise RecordValidationError("Event", errors)
    return event


def normalize_booking(booking: Booking) -> Booking:
    """Lowercase and trim the email, then validate required fields and format."""
    errors: Dict[str, str] = {}

    if booking.event_id is None:
        errors["event_id"] = "Event ID is required"

    email = booking.email
    if isinstance(email, str):
        email = email.strip().lower()
        if email != booking.email:
            booking.email = email
    if not email:
        errors["email"] = "Email is required"
    elif not is_valid_email(email):
        errors["email"] = "Please provide a valid email address"

    if errors:
        raise RecordValidationError("Booking", errors)
    return booking


async def check_event_reference(booking: Booking, lookup: EventLookup) -> None:
    """Make sure the booking points at an existing event.

    Only runs when the booking is new or its event_id changed. A failing
    lookup is reported separately from a missing event.
    """
    if not (is_new_record(booking) or is_modified(booking, "event_id")):
        return

    try:
        event = await lookup(booking.event_id)
    except Exception as exc:
        logger.warning("Event lookup failed for booking reference %s", booking.event_id, exc_info=True)
        raise ReferenceCheckError(booking.event_id) from exc

    if event is None:
        raise ReferenceNotFoundError(booking.event_id)
