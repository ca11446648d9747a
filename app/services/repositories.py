"""
Repository layer over the SQL store.

Repositories translate driver failures into StorageError and enforce the
write-time rules (slug uniqueness, booking -> event integrity). They do not
swallow errors; the read facade in event_queries decides what callers see.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Union

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import (
    BookingNotFoundError,
    ReferentialIntegrityError,
    SlugConflictError,
    StorageError,
    ValidationError,
    VerificationFailure,
)
from app.models import Booking, Event, EventTag
from app.schemas.event import EventCreate, EventSummary
from app.utils.slugs import slugify, with_suffix

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@contextmanager
def storage_errors(db: Session, action: str) -> Iterator[None]:
    """Roll back and re-raise driver errors as StorageError"""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Storage failure while %s: %s", action, exc)
        raise StorageError() from exc


# -------- Event repository --------

class EventRepo:
    @staticmethod
    def list_all(db: Session) -> List[Event]:
        """All events, newest first"""
        with storage_errors(db, "listing events"):
            return db.query(Event).order_by(Event.created_at.desc(), Event.id.asc()).all()

    @staticmethod
    def get_by_slug(db: Session, slug: str) -> Optional[Event]:
        with storage_errors(db, "loading event by slug"):
            return db.query(Event).filter(Event.slug == slug).first()

    @staticmethod
    def get_similar_by_slug(db: Session, slug: str) -> List[EventSummary]:
        """Other events sharing at least one tag with the event at `slug`.

        Results are ordered newest first, ties broken by id.
        """
        with storage_errors(db, "loading similar events"):
            anchor = db.query(Event).filter(Event.slug == slug).first()
            if anchor is None:
                return []

            tags = anchor.tags
            if not tags:
                return []

            rows = db.query(
                Event.id,
                Event.title,
                Event.slug,
                Event.image,
                Event.location,
                Event.date,
                Event.time,
            ).filter(
                Event.id != anchor.id,
                Event.tag_rows.any(EventTag.name.in_(tags))
            ).order_by(Event.created_at.desc(), Event.id.asc()).all()

        return [EventSummary(**row._asdict()) for row in rows]

    @staticmethod
    def exists(db: Session, event_id: str) -> bool:
        with storage_errors(db, "checking event existence"):
            return db.query(Event.id).filter(Event.id == event_id).first() is not None

    @staticmethod
    def count(db: Session) -> int:
        with storage_errors(db, "counting events"):
            return db.query(func.count(Event.id)).scalar()

    @staticmethod
    def _slug_taken(db: Session, slug: str) -> bool:
        with storage_errors(db, "checking slug"):
            return db.query(Event.id).filter(Event.slug == slug).first() is not None

    @staticmethod
    def _next_free_slug(db: Session, base: str) -> str:
        with storage_errors(db, "checking slug"):
            taken = {
                row.slug
                for row in db.query(Event.slug).filter(
                    or_(Event.slug == base, Event.slug.like(f"{base}-%"))
                )
            }
        n = 1
        while with_suffix(base, n) in taken:
            n += 1
        return with_suffix(base, n)

    @staticmethod
    def create(db: Session, data: Union[EventCreate, Dict[str, Any]]) -> Event:
        """Insert a new event and return it with id, slug and timestamps set.

        An explicit slug must be free; a slug derived from the title gets the
        first free numeric suffix instead of failing.
        """
        if not isinstance(data, EventCreate):
            try:
                data = EventCreate.model_validate(data)
            except SchemaValidationError as exc:
                errors = [
                    {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                    for err in exc.errors()
                ]
                raise ValidationError("Invalid event data", errors=errors) from exc

        if data.slug is not None:
            slug = slugify(data.slug)
            if not slug:
                raise ValidationError("Slug must contain letters or digits")
            if EventRepo._slug_taken(db, slug):
                raise SlugConflictError(slug)
        else:
            base = slugify(data.title)
            if not base:
                raise ValidationError("Title must contain letters or digits")
            slug = EventRepo._next_free_slug(db, base)

        event = Event(
            slug=slug,
            title=data.title,
            description=data.description,
            overview=data.overview,
            venue=data.venue,
            location=data.location,
            date=data.date,
            time=data.time,
            mode=data.mode,
            audience=data.audience,
            organizer=data.organizer,
            agenda=list(data.agenda),
            image=data.image,
        )
        event.tag_rows = [EventTag(name=tag, position=i) for i, tag in enumerate(data.tags)]

        db.add(event)
        try:
            db.commit()
        except IntegrityError as exc:
            # lost a race with another create using the same slug
            db.rollback()
            raise SlugConflictError(slug) from exc
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Storage failure while creating event: %s", exc)
            raise StorageError() from exc

        db.refresh(event)
        logger.info("Event created: %s (%s)", event.slug, event.id)
        return event


# -------- Booking repository --------

class BookingRepo:
    # Injected collaborator used for the integrity gate
    event_repo = EventRepo

    @staticmethod
    def normalize_email(raw: Optional[str]) -> str:
        email = (raw or "").strip().lower()
        if not email:
            raise ValidationError("Email is required")
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Please provide a valid email address", email=email)
        return email

    @classmethod
    def verify_event(cls, db: Session, event_id: str) -> None:
        """Fail unless `event_id` names an existing event.

        ReferentialIntegrityError means the event is definitely missing;
        VerificationFailure means the check itself could not run.
        """
        try:
            found = cls.event_repo.exists(db, event_id)
        except (StorageError, SQLAlchemyError) as exc:
            logger.warning("Could not verify event %s: %s", event_id, exc)
            raise VerificationFailure(event_id) from exc

        if not found:
            logger.warning("Booking rejected, event %s does not exist", event_id)
            raise ReferentialIntegrityError(event_id)

    @classmethod
    def create(cls, db: Session, event_id: str, email: str) -> Booking:
        email = cls.normalize_email(email)
        if not event_id or not str(event_id).strip():
            raise ValidationError("Event ID is required")
        event_id = str(event_id).strip()

        cls.verify_event(db, event_id)

        booking = Booking(event_id=event_id, email=email)
        db.add(booking)
        cls._commit(db, event_id)
        db.refresh(booking)
        logger.info("Booking %s created for event %s", booking.id, event_id)
        return booking

    @classmethod
    def update(
        cls,
        db: Session,
        booking_id: str,
        *,
        event_id: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Booking:
        """Change a booking's email and/or event.

        The event is only re-checked when the reference actually changes.
        """
        booking = cls.get(db, booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id=booking_id)

        new_email = cls.normalize_email(email) if email is not None else booking.email
        new_event_id = booking.event_id

        if event_id is not None:
            event_id = str(event_id).strip()
            if not event_id:
                raise ValidationError("Event ID is required")
            if event_id != booking.event_id:
                cls.verify_event(db, event_id)
                new_event_id = event_id

        booking.email = new_email
        booking.event_id = new_event_id
        cls._commit(db, new_event_id)
        db.refresh(booking)
        return booking

    @staticmethod
    def _commit(db: Session, event_id: str) -> None:
        try:
            db.commit()
        except IntegrityError as exc:
            # event removed between the existence check and the write
            db.rollback()
            logger.warning("Foreign key rejected booking for event %s", event_id)
            raise ReferentialIntegrityError(event_id) from exc
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Storage failure while saving booking: %s", exc)
            raise StorageError() from exc

    @staticmethod
    def get(db: Session, booking_id: str) -> Optional[Booking]:
        with storage_errors(db, "loading booking"):
            return db.query(Booking).filter(Booking.id == booking_id).first()

    @staticmethod
    def count(db: Session, event_id: Optional[str] = None) -> int:
        with storage_errors(db, "counting bookings"):
            query = db.query(func.count(Booking.id))
            if event_id is not None:
                query = query.filter(Booking.event_id == event_id)
            return query.scalar()

    @staticmethod
    def list_for_event(db: Session, event_id: str) -> List[Booking]:
        with storage_errors(db, "listing bookings"):
            return db.query(Booking).filter(
                Booking.event_id == event_id
            ).order_by(Booking.created_at.desc(), Booking.id.asc()).all()
