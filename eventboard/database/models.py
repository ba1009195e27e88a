"""SQLAlchemy database models for eventboard."""

from datetime import datetime
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey

from eventboard.database.database import Base


class UserDB(Base):
    """Database model for User."""

    __tablename__ = "users"

    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # User profile
    firstname = Column(String, nullable=False)
    lastname = Column(String, nullable=False)
    # Stored normalized (lowercased), so the unique constraint is case-insensitive.
    email = Column(String, nullable=False, unique=True, index=True)

    # bcrypt hash; never copied into the pydantic model
    password_hash = Column(String, nullable=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from eventboard.models.user import User
        return User(
            id=self.id,
            firstname=self.firstname,
            lastname=self.lastname,
            email=self.email,
            created_at=self.created_at,
        )


class EventDB(Base):
    """Database model for Event."""

    __tablename__ = "events"

    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # Owner (set at creation, never reassigned)
    owner_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Descriptive fields
    title = Column(String, nullable=False)
    date = Column(String, nullable=False)
    place = Column(String, nullable=False)
    category = Column(String, nullable=True)
    description = Column(String, nullable=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def _fields(self) -> dict:
        return dict(
            id=self.id,
            owner_id=self.owner_id,
            title=self.title,
            date=self.date,
            place=self.place,
            category=self.category,
            description=self.description,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from eventboard.models.event import Event
        return Event(**self._fields())

    def to_list_item(self, author):
        """Convert to an EventListItem annotated with the owner's display name."""
        from eventboard.models.event import EventListItem
        return EventListItem(author=author, **self._fields())

    @classmethod
    def from_pydantic(cls, event):
        """Create database model from Pydantic model."""
        return cls(
            id=event.id,
            owner_id=event.owner_id,
            title=event.title,
            date=event.date,
            place=event.place,
            category=event.category,
            description=event.description,
            created_at=event.created_at,
            updated_at=event.updated_at,
        )
