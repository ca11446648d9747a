"""
Admin API routes - requires authentication
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.core.errors import StorageError
from app.schemas.booking import BookingResponse
from app.schemas.event import EventCreate
from app.services.event_queries import EventQueryService
from app.services.repositories import BookingRepo, EventRepo
from app.api.routes_public import serialize_event
from app.utils.security import verify_admin_token
from app.utils.responses import success_response, not_found_error

router = APIRouter()

@router.post("/events", status_code=201)
def create_event(
    event_data: EventCreate,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Create a new event

    The slug is derived from the title unless one is supplied; a supplied
    slug that is already taken is rejected with 409.
    """
    event = EventRepo.create(db, event_data)

    return success_response(
        message="Event created successfully",
        data=serialize_event(event),
        status_code=201
    )

@router.get("/events/{slug}/bookings")
def list_event_bookings(
    slug: str,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Bookings for one event, newest first"""
    found = EventQueryService.get_event_by_slug_result(db, slug)
    if found.degraded:
        raise StorageError() from found.error
    event = found.value
    if not event:
        raise not_found_error("Event")

    bookings = BookingRepo.list_for_event(db, event.id)

    return success_response(
        message="Bookings retrieved",
        data={
            "event_id": event.id,
            "total_bookings": len(bookings),
            "bookings": [
                BookingResponse.model_validate(b).model_dump(mode="json") for b in bookings
            ]
        }
    )
