"""
Booking workflow used by the booking endpoints
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.models import Booking
from app.services.event_queries import EventQueryService
from app.services.repositories import BookingRepo
from app.services.results import ReadResult

logger = logging.getLogger(__name__)


class BookingService:
    """Creates bookings and reports booking counts for event pages"""

    def __init__(self, bookings=BookingRepo, queries=EventQueryService):
        self.bookings = bookings
        self.queries = queries

    def book(self, db: Session, event_id: str, email: str) -> Booking:
        """Book `email` onto `event_id`.

        Errors from the repository propagate unchanged: ValidationError,
        ReferentialIntegrityError ("Event not found") or VerificationFailure
        ("could not verify, try again").
        """
        return self.bookings.create(db, event_id, email)

    def change(
        self,
        db: Session,
        booking_id: str,
        event_id: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Booking:
        return self.bookings.update(db, booking_id, event_id=event_id, email=email)

    def count_for_slug(self, db: Session, slug: str) -> ReadResult[Optional[int]]:
        """Number of bookings for the event at `slug`, None if no such event"""
        found = self.queries.get_event_by_slug_result(db, slug)
        if found.degraded or found.value is None:
            return ReadResult(value=None, error=found.error)

        try:
            return ReadResult.ok(self.bookings.count(db, found.value.id))
        except Exception as exc:
            logger.exception("Could not count bookings for %s", slug)
            return ReadResult.failed(None, exc)


booking_service = BookingService()
