"""
Error taxonomy for events and bookings
"""

from enum import Enum
from typing import Dict


class ErrorCode(Enum):
    """Machine-readable error codes returned to API clients."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    EVENT_REFERENCE_NOT_FOUND = "EVENT_REFERENCE_NOT_FOUND"
    EVENT_REFERENCE_CHECK_FAILED = "EVENT_REFERENCE_CHECK_FAILED"
    DUPLICATE_SLUG = "DUPLICATE_SLUG"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    DATABASE_UNAVAILABLE = "DATABASE_UNAVAILABLE"


class DomainError(Exception):
    """Base error with a code and a user-safe message."""

    code: ErrorCode

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigurationError(DomainError):
    """Raised when required configuration is missing. Not retryable."""

    code = ErrorCode.CONFIGURATION_ERROR


class RecordValidationError(DomainError):
    """Raised when one or more fields of a record break a rule.

    ``errors`` maps each offending field to its message.
    """

    code = ErrorCode.VALIDATION_ERROR

    def __init__(self, model: str, errors: Dict[str, str]) -> None:
        self.model = model
        self.errors = dict(errors)
        details = ", ".join(f"{field}: {message}" for field, message in self.errors.items())
        super().__init__(f"{model} validation failed: {details}")

    @property
    def fields(self) -> list:
        return list(self.errors)


class ReferenceNotFoundError(DomainError):
    """Raised when a booking points at an event that does not exist."""

    code = ErrorCode.EVENT_REFERENCE_NOT_FOUND

    def __init__(self, event_id) -> None:
        super().__init__("Referenced event does not exist")
        self.event_id = event_id


class ReferenceCheckError(DomainError):
    """Raised when the event lookup itself failed."""

    code = ErrorCode.EVENT_REFERENCE_CHECK_FAILED

    def __init__(self, event_id) -> None:
        super().__init__("Failed to validate event reference")
        self.event_id = event_id


class DuplicateSlugError(DomainError):
    """Raised when an event slug collides with an existing one."""

    code = ErrorCode.DUPLICATE_SLUG

    def __init__(self, slug: str) -> None:
        super().__init__(f"An event with slug '{slug}' already exists; choose a different title")
        self.slug = slug


class EventNotFoundError(DomainError):
    """Raised when an event lookup by slug or id finds nothing."""

    code = ErrorCode.EVENT_NOT_FOUND

    def __init__(self, key) -> None:
        super().__init__("Event not found")
        self.key = key
