"""User data models for eventboard."""

from datetime import datetime
from pydantic import BaseModel, Field


class User(BaseModel):
    """Public user record (the password hash never leaves the credential store)."""

    id: str = Field(..., description="Unique user identifier (UUID v4)")
    firstname: str = Field(..., description="First name")
    lastname: str = Field(..., description="Last name")
    email: str = Field(..., description="Normalized (lowercased) email address")
    created_at: datetime = Field(..., description="User creation timestamp")


class Identity(BaseModel):
    """Caller identity carried by a session token."""

    id: str = Field(..., description="User ID (token subject)")
    firstname: str
    lastname: str
    email: str
