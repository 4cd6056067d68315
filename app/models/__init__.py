"""
Database models package
"""

from .event import Event, EventTag
from .booking import Booking

__all__ = ["Event", "EventTag", "Booking"]
