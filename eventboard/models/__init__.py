"""Data models for eventboard."""

from eventboard.models.user import User, Identity
from eventboard.models.event import Event, EventListItem, EventPatch

__all__ = [
    "User",
    "Identity",
    "Event",
    "EventListItem",
    "EventPatch",
]
