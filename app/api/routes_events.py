"""
Event API routes: create, list, detail and similar events
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.errors import ErrorCode
from app.schemas.event import EventCreate, EventResponse
from app.services.event_service import EventService
from app.utils.responses import success_response, error_response

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("")
async def create_event(
    event_data: EventCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create a new event. The image field holds an already-hosted image URL."""
    event = await EventService.create_event(db, event_data)
    return success_response(
        message="Event created",
        data=EventResponse.model_validate(event),
        status_code=201
    )

@router.get("")
async def list_events(
    request: Request,
    tag: Optional[str] = None
):
    """List events, newest first"""
    # Connection failures land in the "Fetch failed" branch too
    try:
        async with request.app.state.db.session() as db:
            events = await EventService.list_events(db, tag=tag)
    except (SQLAlchemyError, OSError):
        logger.exception("Listing events failed")
        return error_response(
            message="Fetch failed",
            error_code=ErrorCode.DATABASE_UNAVAILABLE.value,
            details={"events": []},
            status_code=503
        )

    return success_response(
        message="Events retrieved successfully",
        data={"events": [EventResponse.model_validate(e) for e in events]}
    )

@router.get("/{slug}")
async def get_event(
    slug: str,
    db: AsyncSession = Depends(get_db)
):
    """Event detail by slug, with booking count"""
    detail = await EventService.get_event_detail(db, slug)
    return success_response(
        message="Event retrieved successfully",
        data={"event": detail}
    )

@router.get("/{slug}/similar")
async def get_similar_events(
    slug: str,
    db: AsyncSession = Depends(get_db)
):
    """Events sharing a tag with the given event"""
    events = await EventService.get_similar_events(db, slug)
    return success_response(
        message="Similar events retrieved successfully",
        data={"events": [EventResponse.model_validate(e) for e in events]}
    )
