"""
Booking API routes
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.errors import ErrorCode
from app.schemas.booking import BookingCreate, BookingResponse, BookingWithEvent
from app.services.booking_service import BookingService
from app.utils.security import rate_limit_check, get_client_ip
from app.utils.responses import ERROR_STATUS, success_response, error_response, rate_limit_error

router = APIRouter()

@router.post("")
async def create_booking(
    request: Request,
    booking_data: BookingCreate,
    db: AsyncSession = Depends(get_db)
):
    """Book a spot at an event"""
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        rate_limit_error()

    outcome = await BookingService.create_booking(
        db,
        event_id=booking_data.event_id,
        email=booking_data.email
    )

    if not outcome.success:
        return error_response(
            message=outcome.message,
            error_code=outcome.error_code,
            status_code=ERROR_STATUS.get(ErrorCode(outcome.error_code), 400)
        )

    return success_response(
        message=outcome.message,
        data=BookingResponse.model_validate(outcome.booking),
        status_code=201
    )

@router.get("")
async def list_bookings(
    event_id: Optional[int] = None,
    email: Optional[str] = None,
    expand: bool = False,
    db: AsyncSession = Depends(get_db)
):
    """Bookings filtered by event and/or email; expand=true includes the event"""
    if event_id is None and not email:
        return error_response(
            message="event_id or email is required",
            status_code=400
        )

    bookings = await BookingService.list_bookings(db, event_id=event_id, email=email, expand=expand)
    schema = BookingWithEvent if expand else BookingResponse
    return success_response(
        message="Bookings retrieved successfully",
        data={
            "bookings": [schema.model_validate(b) for b in bookings],
            "count": len(bookings)
        }
    )
