"""
Booking routes
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.booking import BookingCreate, BookingResponse, BookingUpdate
from app.services.booking_service import booking_service
from app.utils.responses import success_response, rate_limit_error
from app.utils.security import get_client_ip, rate_limit_check

router = APIRouter()

@router.post("/bookings", status_code=201)
def create_booking(
    booking_data: BookingCreate,
    request: Request,
    db: Session = Depends(get_db)
):
    """Book an event

    404 EVENT_NOT_FOUND when the event does not exist, 503
    EVENT_VERIFICATION_FAILED when it could not be checked (retry).
    """
    if not rate_limit_check(get_client_ip(request), scope="bookings"):
        raise rate_limit_error()

    booking = booking_service.book(db, booking_data.event_id, booking_data.email)

    return success_response(
        message="Booking created successfully",
        data=BookingResponse.model_validate(booking).model_dump(mode="json"),
        status_code=201
    )

@router.patch("/bookings/{booking_id}")
def update_booking(
    booking_id: str,
    booking_data: BookingUpdate,
    db: Session = Depends(get_db)
):
    """Change the email or event of an existing booking"""
    booking = booking_service.change(
        db,
        booking_id,
        event_id=booking_data.event_id,
        email=booking_data.email
    )

    return success_response(
        message="Booking updated successfully",
        data=BookingResponse.model_validate(booking).model_dump(mode="json")
    )
