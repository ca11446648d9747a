"""
Event model
"""

import enum
from sqlalchemy import Column, Integer, String, Text, Enum, JSON, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from app.core.db import Base
from app.models.mixins import TimestampMixin, new_id


class EventMode(str, enum.Enum):
    OFFLINE = "offline"
    ONLINE = "online"
    HYBRID = "hybrid"


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(String(32), primary_key=True, default=new_id)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    overview = Column(Text, nullable=False)
    venue = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    date = Column(String(50), nullable=False)
    time = Column(String(50), nullable=False)
    mode = Column(Enum(EventMode, values_callable=lambda e: [m.value for m in e]), nullable=False)
    audience = Column(String(255), nullable=False)
    organizer = Column(Text, nullable=False)
    agenda = Column(JSON, nullable=False, default=list)
    image = Column(String(500), nullable=False)

    # Relationships
    tag_rows = relationship(
        "EventTag",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventTag.position",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_events_created_at", "created_at"),
    )

    @property
    def tags(self) -> list[str]:
        return [row.name for row in self.tag_rows]

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, slug={self.slug})>"


class EventTag(Base):
    __tablename__ = "event_tags"

    id = Column(String(32), primary_key=True, default=new_id)
    event_id = Column(String(32), ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    event = relationship("Event", back_populates="tag_rows")

    __table_args__ = (
        UniqueConstraint("event_id", "name", name="uq_event_tag"),
    )
