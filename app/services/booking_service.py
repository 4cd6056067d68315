"""
Booking submission service
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConfigurationError, DomainError, ErrorCode
from app.models import Booking
from app.services.repositories import BookingRepo

logger = logging.getLogger(__name__)

@dataclass
class BookingOutcome:
    """Result of a booking submission.

    ``success`` is the flag the booking form relies on; ``error_code`` and
    ``message`` say why a submission failed.
    """
    success: bool
    booking: Optional[Booking] = None
    error_code: Optional[str] = None
    message: str = ""

class BookingService:
    """Service for booking operations"""

    @staticmethod
    async def create_booking(db: AsyncSession, event_id: int, email: str) -> BookingOutcome:
        """Book a spot. Failures are logged and reported in the outcome.

        Missing configuration is not a booking failure and is re-raised.
        """
        try:
            booking = await BookingRepo.create(db, event_id=event_id, email=email)
        except ConfigurationError:
            raise
        except DomainError as exc:
            logger.warning("create booking failed for event %s: %s", event_id, exc)
            return BookingOutcome(success=False, error_code=exc.code.value, message=exc.message)
        except (SQLAlchemyError, OSError):
            logger.exception("create booking failed for event %s", event_id)
            return BookingOutcome(
                success=False,
                error_code=ErrorCode.DATABASE_UNAVAILABLE.value,
                message="Booking could not be saved, please try again",
            )

        logger.info("Created booking %s for event %s", booking.id, event_id)
        return BookingOutcome(success=True, booking=booking, message="Booking confirmed")

    @staticmethod
    async def list_bookings(
        db: AsyncSession,
        event_id: Optional[int] = None,
        email: Optional[str] = None,
        expand: bool = False,
    ) -> List[Booking]:
        """Bookings for an event and/or an email address"""
        if event_id is not None:
            bookings = await BookingRepo.list_by_event(db, event_id, with_event=expand)
            if email:
                email = email.strip().lower()
                bookings = [b for b in bookings if b.email == email]
            return bookings
        if email:
            return await BookingRepo.list_by_email(db, email, with_event=expand)
        return []

    @staticmethod
    async def count_bookings(db: AsyncSession, event_id: int) -> int:
        return await BookingRepo.count_by_event(db, event_id)
