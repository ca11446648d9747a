"""
Booking model

A booking references its event but does not own it: deleting a booking
never touches the event, and the event reference is checked before insert.
"""

from sqlalchemy import Column, String, ForeignKey, Index
from sqlalchemy.orm import relationship

from app.core.db import Base
from app.models.mixins import TimestampMixin, new_id


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(String(32), primary_key=True, default=new_id)
    event_id = Column(String(32), ForeignKey("events.id"), nullable=False)
    email = Column(String(320), nullable=False)

    event = relationship("Event")

    __table_args__ = (
        Index("ix_bookings_event_id", "event_id"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, event={self.event_id})>"
