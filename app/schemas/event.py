"""
Event-related Pydantic schemas
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.event import EventMode
from app.utils.slugs import MAX_SLUG_LENGTH

MAX_TAG_LENGTH = 100


class EventCreate(BaseModel):
    """Schema for creating an event

    `agenda` may be sent as a list or as one item per line, `tags` as a list
    or comma separated, matching what the event form submits.
    """
    title: str = Field(max_length=100)
    description: str = Field(max_length=1000)
    overview: str = Field(max_length=500)
    venue: str = Field(max_length=255)
    location: str = Field(max_length=255)
    date: str = Field(max_length=50)
    time: str = Field(max_length=50)
    mode: EventMode = EventMode.OFFLINE
    audience: str = Field(max_length=255)
    organizer: str = Field(max_length=1000)
    agenda: List[str]
    tags: List[str]
    image: str = Field(max_length=500)
    slug: Optional[str] = Field(default=None, max_length=MAX_SLUG_LENGTH)

    @field_validator("slug", mode="before")
    @classmethod
    def _blank_slug_is_derived(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator(
        "title", "description", "overview", "venue", "location",
        "date", "time", "audience", "organizer", "image",
    )
    @classmethod
    def _required_text(cls, value: str, info) -> str:
        value = value.strip()
        if not value:
            raise ValueError(f"{info.field_name} is required")
        return value

    @field_validator("agenda", mode="before")
    @classmethod
    def _split_agenda(cls, value):
        if isinstance(value, str):
            value = value.split("\n")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value):
        if isinstance(value, str):
            value = value.split(",")
        return value

    @field_validator("agenda")
    @classmethod
    def _clean_agenda(cls, value: List[str]) -> List[str]:
        items = [item.strip() for item in value if item.strip()]
        if not items:
            raise ValueError("At least one agenda item is required")
        return items

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, value: List[str]) -> List[str]:
        tags: List[str] = []
        for tag in value:
            tag = tag.strip()
            if len(tag) > MAX_TAG_LENGTH:
                raise ValueError(f"Tags must be at most {MAX_TAG_LENGTH} characters")
            if tag and tag not in tags:
                tags.append(tag)
        if not tags:
            raise ValueError("At least one tag is required")
        return tags


class EventResponse(BaseModel):
    """Full event response"""
    id: str
    slug: str
    title: str
    description: str
    overview: str
    venue: str
    location: str
    date: str
    time: str
    mode: EventMode
    audience: str
    organizer: str
    agenda: List[str]
    tags: List[str]
    image: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EventSummary(BaseModel):
    """Reduced event shape returned by the similar-events query"""
    id: str
    title: str
    slug: str
    image: str
    location: str
    date: str
    time: str

    model_config = ConfigDict(from_attributes=True)
