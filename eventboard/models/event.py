"""Event data models for eventboard."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class Event(BaseModel):
    """Canonical Event model."""

    id: str = Field(..., description="Unique event identifier (UUID v4)")
    owner_id: str = Field(..., description="User ID who owns this event")
    title: str = Field(..., description="Event title")
    date: str = Field(..., description="Event date as entered by the owner")
    place: str = Field(..., description="Where the event takes place")
    category: Optional[str] = Field(None, description="Free-form category")
    description: Optional[str] = Field(None, description="Longer description")
    created_at: datetime = Field(..., description="Creation timestamp (display ordering key)")
    updated_at: datetime = Field(..., description="Last update timestamp")


class EventListItem(Event):
    """Event annotated with its owner's display name."""

    author: Optional[str] = Field(None, description="Owner's 'firstname lastname'")


class EventPatch(BaseModel):
    """Partial update for an event. Unset fields are left unchanged."""

    title: Optional[str] = None
    date: Optional[str] = None
    place: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
