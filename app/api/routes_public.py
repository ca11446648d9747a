"""
Public API routes - no authentication required
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.event import EventResponse
from app.services.booking_service import booking_service
from app.services.event_queries import EventQueryService
from app.utils.responses import success_response, not_found_error

router = APIRouter()

def serialize_event(event) -> dict:
    return EventResponse.model_validate(event).model_dump(mode="json")

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

@router.get("/api/events")
def list_events(db: Session = Depends(get_db)):
    """All events, newest first"""
    result = EventQueryService.get_all_events_result(db)

    return success_response(
        message="Events retrieved successfully",
        data=[serialize_event(event) for event in result.value],
        degraded=result.degraded
    )

@router.get("/api/events/{slug}")
def get_event(slug: str, db: Session = Depends(get_db)):
    """Event detail by slug"""
    result = EventQueryService.get_event_by_slug_result(db, slug)
    if result.value is None:
        if result.degraded:
            return success_response(message="Event unavailable", data=None, degraded=True)
        raise not_found_error("Event")

    return success_response(
        message="Event retrieved successfully",
        data=serialize_event(result.value)
    )

@router.get("/api/events/{slug}/similar")
def get_similar_events(slug: str, db: Session = Depends(get_db)):
    """Other events sharing at least one tag"""
    result = EventQueryService.get_similar_events_by_slug_result(db, slug)

    return success_response(
        message="Similar events retrieved successfully",
        data=[summary.model_dump(mode="json") for summary in result.value],
        degraded=result.degraded
    )

@router.get("/api/events/{slug}/bookings/count")
def get_booking_count(slug: str, db: Session = Depends(get_db)):
    """How many people booked the event"""
    result = booking_service.count_for_slug(db, slug)
    if result.value is None and not result.degraded:
        raise not_found_error("Event")

    return success_response(
        message="Booking count retrieved",
        data={"count": result.value or 0},
        degraded=result.degraded
    )
