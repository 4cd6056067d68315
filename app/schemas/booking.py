"""
Booking-related Pydantic schemas
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from app.schemas.event import EventResponse

class BookingCreate(BaseModel):
    """Booking submission. The email is normalized and checked on save."""
    event_id: int
    email: str

class BookingResponse(BaseModel):
    """Booking response schema"""
    id: int
    event_id: int
    email: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class BookingWithEvent(BookingResponse):
    """Booking with the referenced event expanded"""
    event: Optional[EventResponse] = None
