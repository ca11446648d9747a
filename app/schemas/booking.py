"""
Booking-related Pydantic schemas
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class BookingCreate(BaseModel):
    """Schema for booking an event

    The email is checked by the booking repository, not here, so that a bad
    address produces the same error whichever caller creates the booking.
    """
    event_id: str
    email: str


class BookingUpdate(BaseModel):
    event_id: Optional[str] = None
    email: Optional[str] = None


class BookingResponse(BaseModel):
    id: str
    event_id: str
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
