from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

EventMode = Literal["online", "offline", "hybrid"]


class EventUpdate(BaseModel):
    """Partial update; only the fields sent are applied."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    overview: Optional[str] = None
    venue: Optional[str] = None
    location: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    mode: Optional[str] = None
    audience: Optional[str] = None
    agenda: Optional[List[str]] = None
    organizer: Optional[str] = None
    tags: Optional[List[str]] = None
    image: Optional[str] = None


class BookingCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    event_id: str = Field("", alias="eventId")
    email: str = ""


class EventOut(BaseModel):
    id: str
    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str = Field(..., description="YYYY-MM-DD")
    time: str = Field(..., description="24-hour HH:MM")
    mode: EventMode
    audience: str
    agenda: List[str]
    organizer: str
    tags: List[str]
    createdAt: str
    updatedAt: str


class BookingOut(BaseModel):
    id: str
    eventId: str
    email: str
    createdAt: str
    updatedAt: str
