"""
Read facade used by the presentation layer.

Nothing here raises. A failed read is logged and comes back as an empty
list or None; the `*_result` variants also hand back the error so a caller
can tell an empty catalogue from an unavailable one.
"""

import logging
from typing import Callable, List, Optional, TypeVar

from sqlalchemy.orm import Session

from app.models import Event
from app.schemas.event import EventSummary
from app.services.repositories import EventRepo
from app.services.results import ReadResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _guarded(action: str, fallback: T, read: Callable[[], T]) -> ReadResult[T]:
    try:
        return ReadResult.ok(read())
    except Exception as exc:
        logger.exception("Read failed while %s; returning fallback", action)
        return ReadResult.failed(fallback, exc)


class EventQueryService:
    """Read operations on events for pages and public endpoints"""

    repo = EventRepo

    @classmethod
    def get_all_events_result(cls, db: Session) -> ReadResult[List[Event]]:
        return _guarded("listing events", [], lambda: cls.repo.list_all(db))

    @classmethod
    def get_event_by_slug_result(cls, db: Session, slug: str) -> ReadResult[Optional[Event]]:
        return _guarded(f"loading event {slug!r}", None, lambda: cls.repo.get_by_slug(db, slug))

    @classmethod
    def get_similar_events_by_slug_result(cls, db: Session, slug: str) -> ReadResult[List[EventSummary]]:
        return _guarded(
            f"loading events similar to {slug!r}", [],
            lambda: cls.repo.get_similar_by_slug(db, slug),
        )

    @classmethod
    def get_all_events(cls, db: Session) -> List[Event]:
        return cls.get_all_events_result(db).value

    @classmethod
    def get_event_by_slug(cls, db: Session, slug: str) -> Optional[Event]:
        return cls.get_event_by_slug_result(db, slug).value

    @classmethod
    def get_similar_events_by_slug(cls, db: Session, slug: str) -> List[EventSummary]:
        return cls.get_similar_events_by_slug_result(db, slug).value
