"""
Event-related Pydantic schemas
"""

from datetime import datetime
from typing import List
from pydantic import BaseModel, field_validator

class EventCreate(BaseModel):
    """Schema for creating an event.

    Values are taken as submitted; trimming, slug derivation and the
    date/time rules are applied when the event is saved.
    """
    title: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: str
    audience: str
    organizer: str
    agenda: List[str]
    tags: List[str]

class EventResponse(BaseModel):
    """Event as returned by the API"""
    id: int
    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: str
    audience: str
    organizer: str
    agenda: List[str]
    tags: List[str]
    created_at: datetime
    updated_at: datetime

    @field_validator("agenda", "tags", mode="before")
    @classmethod
    def _as_list(cls, value):
        # tags come from an association proxy, not a plain list
        return list(value or [])

    class Config:
        from_attributes = True

class EventDetail(EventResponse):
    """Event detail with booking count"""
    booking_count: int
