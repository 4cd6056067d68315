"""
Event listing, detail and creation service
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import EventNotFoundError
from app.models import Event
from app.schemas.event import EventCreate, EventDetail, EventResponse
from app.services.repositories import BookingRepo, EventRepo

logger = logging.getLogger(__name__)

class EventService:
    """Service for event operations"""

    @staticmethod
    async def create_event(db: AsyncSession, event_data: EventCreate) -> Event:
        """Create an event; raises RecordValidationError or DuplicateSlugError"""
        event = await EventRepo.create(db, **event_data.model_dump())
        logger.info("Created event %s (id=%s)", event.slug, event.id)
        return event

    @staticmethod
    async def list_events(db: AsyncSession, tag: Optional[str] = None) -> List[Event]:
        """List events newest first, optionally only those carrying ``tag``"""
        if tag:
            return await EventRepo.list_by_tag(db, tag.strip())
        return await EventRepo.list_all(db)

    @staticmethod
    async def get_event_by_slug(db: AsyncSession, slug: str) -> Event:
        event = await EventRepo.get_by_slug(db, slug)
        if event is None:
            raise EventNotFoundError(slug)
        return event

    @staticmethod
    async def get_event_detail(db: AsyncSession, slug: str) -> EventDetail:
        """Event by slug together with how many bookings it has"""
        event = await EventService.get_event_by_slug(db, slug)
        booking_count = await BookingRepo.count_by_event(db, event.id)
        return EventDetail(
            **EventResponse.model_validate(event).model_dump(),
            booking_count=booking_count,
        )

    @staticmethod
    async def get_similar_events(db: AsyncSession, slug: str) -> List[Event]:
        """Events sharing at least one tag with the event at ``slug``"""
        event = await EventService.get_event_by_slug(db, slug)
        return await EventRepo.list_similar(db, event)
