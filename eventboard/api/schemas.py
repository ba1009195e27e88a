"""Request/response models for the eventboard API.

Request fields are optional at the schema level so that missing or blank
values reach the repositories, which report them as validation errors (400)
instead of FastAPI's default 422.
"""

from typing import Optional
from pydantic import BaseModel, Field

from eventboard.models.event import Event


class RegisterRequest(BaseModel):
    """Request model for user registration."""
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    """Request model for login."""
    email: Optional[str] = None
    password: Optional[str] = None


class EventCreateRequest(BaseModel):
    """Request model for publishing an event."""
    title: Optional[str] = None
    date: Optional[str] = None
    place: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None


class UserOut(BaseModel):
    """Public user fields returned on login."""
    id: str
    firstname: str
    lastname: str
    email: str


class SuccessResponse(BaseModel):
    """Generic success envelope."""
    success: bool = True
    message: Optional[str] = None


class LoginResponse(BaseModel):
    """Response model for login."""
    success: bool = True
    token: str = Field(..., description="Bearer token for protected routes")
    user: UserOut


class EventResponse(BaseModel):
    """Response for event creation and update."""
    success: bool = True
    message: Optional[str] = None
    event: Event
