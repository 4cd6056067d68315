"""
Booking model
"""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from app.core.db import Base

class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    # Plain reference, no foreign key: deleting an event leaves its bookings alone
    event_id = Column(Integer, nullable=False, index=True)
    email = Column(String(320), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    # Read-only expansion of the referenced event
    event = relationship(
        "Event",
        primaryjoin="foreign(Booking.event_id) == Event.id",
        viewonly=True,
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<Booking {self.email!r} -> {self.event_id}>"
