"""
Repository layer: the only place events and bookings are written or queried.

Every write goes through ``save``, which runs the model rules from
``app.services.validation`` before the row reaches the database.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.errors import DomainError, DuplicateSlugError, RecordValidationError
from app.models import Booking, Event, EventTag
from app.services.validation import (
    is_new_record,
    check_event_reference,
    normalize_booking,
    normalize_event,
)

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns store values."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _touch(record) -> None:
    now = utcnow()
    if is_new_record(record) or record.created_at is None:
        record.created_at = now
    # Never earlier than created_at, even if the clock stepped back
    record.updated_at = max(now, record.created_at)


async def _discard_changes(db: AsyncSession, record) -> None:
    """Reload a stored record so rejected edits are not flushed later."""
    if not is_new_record(record):
        with db.no_autoflush:
            await db.refresh(record)


# -------- Event repository --------

class EventRepo:
    @staticmethod
    async def save(db: AsyncSession, event: Event) -> Event:
        """Normalize, validate and persist an event (insert or update)."""
        try:
            normalize_event(event)
        except RecordValidationError:
            await _discard_changes(db, event)
            raise
        _touch(event)
        db.add(event)
        # rollback expires a stored event, so read the slug first
        slug = event.slug
        try:
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            if "slug" in str(exc.orig).lower():
                logger.info("Rejected duplicate event slug %s", slug)
                raise DuplicateSlugError(slug) from exc
            raise
        return event

    @staticmethod
    async def create(db: AsyncSession, **fields) -> Event:
        tags = fields.pop("tags", None) or []
        agenda = fields.pop("agenda", None) or []
        event = Event(agenda=list(agenda), tags=list(tags), **fields)
        return await EventRepo.save(db, event)

    @staticmethod
    async def get_by_id(db: AsyncSession, event_id: int) -> Optional[Event]:
        return await db.get(Event, event_id)

    @staticmethod
    async def get_by_slug(db: AsyncSession, slug: str) -> Optional[Event]:
        result = await db.execute(select(Event).where(Event.slug == slug))
        return result.scalars().first()

    @staticmethod
    async def list_all(db: AsyncSession) -> List[Event]:
        """All events, newest first."""
        result = await db.execute(
            select(Event).order_by(Event.created_at.desc(), Event.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_by_tag(db: AsyncSession, tag: str) -> List[Event]:
        tagged = select(EventTag.event_id).where(EventTag.name == tag)
        result = await db.execute(
            select(Event)
            .where(Event.id.in_(tagged))
            .order_by(Event.created_at.desc(), Event.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_similar(db: AsyncSession, event: Event) -> List[Event]:
        """Other events sharing at least one tag with ``event``."""
        tags: Sequence[str] = list(event.tags)
        if not tags:
            return []
        tagged = select(EventTag.event_id).where(EventTag.name.in_(tags))
        result = await db.execute(
            select(Event)
            .where(Event.id.in_(tagged), Event.id != event.id)
            .order_by(Event.created_at.desc(), Event.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def delete(db: AsyncSession, event: Event) -> None:
        await db.delete(event)
        await db.commit()


# -------- Booking repository --------

class BookingRepo:
    @staticmethod
    async def save(db: AsyncSession, booking: Booking) -> Booking:
        """Normalize, check the event reference and persist a booking."""
        try:
            normalize_booking(booking)
            with db.no_autoflush:
                await check_event_reference(
                    booking, lambda event_id: EventRepo.get_by_id(db, event_id)
                )
        except DomainError:
            await _discard_changes(db, booking)
            raise
        _touch(booking)
        db.add(booking)
        try:
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            raise
        return booking

    @staticmethod
    async def create(db: AsyncSession, event_id: int, email: str) -> Booking:
        return await BookingRepo.save(db, Booking(event_id=event_id, email=email))

    @staticmethod
    async def get_by_id(db: AsyncSession, booking_id: int) -> Optional[Booking]:
        return await db.get(Booking, booking_id)

    @staticmethod
    async def list_by_event(db: AsyncSession, event_id: int, with_event: bool = False) -> List[Booking]:
        query = select(Booking).where(Booking.event_id == event_id).order_by(Booking.created_at, Booking.id)
        if with_event:
            query = query.options(selectinload(Booking.event))
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def list_by_email(db: AsyncSession, email: str, with_event: bool = False) -> List[Booking]:
        query = (
            select(Booking)
            .where(Booking.email == email.strip().lower())
            .order_by(Booking.created_at, Booking.id)
        )
        if with_event:
            query = query.options(selectinload(Booking.event))
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def count_by_event(db: AsyncSession, event_id: int) -> int:
        result = await db.execute(
            select(func.count()).select_from(Booking).where(Booking.event_id == event_id)
        )
        return int(result.scalar_one())

    @staticmethod
    async def delete(db: AsyncSession, booking: Booking) -> None:
        await db.delete(booking)
        await db.commit()
