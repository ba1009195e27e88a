"""Repository for Event database operations (the event store)."""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import desc, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventboard.database.models import EventDB, UserDB
from eventboard.errors import AuthError, ForbiddenError, NotFoundError, ValidationError
from eventboard.models.event import Event, EventListItem, EventPatch
from eventboard.models.event_factory import apply_event_patch, clean_text, create_event

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 30
# Keeps the OFFSET inside a 64-bit SQL integer for any accepted limit.
MAX_PAGE = 10**6


def _author(user_db: Optional[UserDB]) -> Optional[str]:
    if user_db is None:
        return None
    return f"{user_db.firstname} {user_db.lastname}"


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class EventRepository:
    """Repository for Event database operations."""

    def __init__(self, db: Session, clock: Callable[[], datetime] = datetime.utcnow):
        self.db = db
        self.clock = clock

    def create(
        self,
        owner_id: str,
        title: Optional[str],
        date: Optional[str],
        place: Optional[str],
        category: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Event:
        """Create a new event owned by ``owner_id``."""
        event = create_event(owner_id, title, date, place, category, description, now=self.clock())
        try:
            event_db = EventDB.from_pydantic(event)
            self.db.add(event_db)
            self.db.commit()
            self.db.refresh(event_db)
            logger.debug(f"Created event {event.id}: {event.title[:50]}")
            return event_db.to_pydantic()
        except IntegrityError:
            # The token subject no longer exists (tokens are not revoked).
            self.db.rollback()
            logger.warning(f"Refused event {event.id}: owner {owner_id} does not exist")
            raise AuthError("invalid")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create event {event.id}: {type(e).__name__}: {str(e)}")
            raise

    def _listing_query(self):
        return self.db.query(EventDB, UserDB).outerjoin(UserDB, EventDB.owner_id == UserDB.id)

    def get(self, event_id: str) -> Optional[EventListItem]:
        """Get an event by ID, annotated with its author."""
        row = self._listing_query().filter(EventDB.id == event_id).first()
        if not row:
            return None
        event_db, user_db = row
        return event_db.to_list_item(_author(user_db))

    def list(self, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT, query: Optional[str] = None) -> List[EventListItem]:
        """List events, newest first.

        Args:
            page: 1-based page number
            limit: Page size
            query: Optional case-insensitive search over title, description,
                place and category

        Returns:
            One page of events, each annotated with the owner's display name
        """
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")
        if page > MAX_PAGE:
            raise ValidationError(f"page must not exceed {MAX_PAGE}")

        q = self._listing_query()
        term = clean_text(query)
        if term:
            pattern = f"%{_escape_like(term.lower())}%"
            q = q.filter(
                or_(*(
                    column.ilike(pattern, escape="\\")
                    for column in (EventDB.title, EventDB.description, EventDB.place, EventDB.category)
                ))
            )
        rows = (
            q.order_by(desc(EventDB.created_at))
            .limit(limit)
            .offset((page - 1) * limit)
            .all()
        )
        return [event_db.to_list_item(_author(user_db)) for event_db, user_db in rows]

    def _get_owned_for_update(self, event_id: str, caller_id: str) -> EventDB:
        event_db = (
            self.db.query(EventDB)
            .filter(EventDB.id == event_id)
            .with_for_update()
            .first()
        )
        if not event_db:
            raise NotFoundError("Event not found")
        if event_db.owner_id != caller_id:
            logger.warning(f"User {caller_id} refused access to event {event_id} owned by {event_db.owner_id}")
            raise ForbiddenError("Not allowed to modify this event")
        return event_db

    def update(self, event_id: str, caller_id: str, patch: EventPatch) -> Event:
        """Apply a partial update to an event owned by ``caller_id``.

        Raises:
            NotFoundError: If the event does not exist
            ForbiddenError: If ``caller_id`` is not the owner
            ValidationError: If the patch blanks a required field
        """
        try:
            event_db = self._get_owned_for_update(event_id, caller_id)
            updated = apply_event_patch(event_db.to_pydantic(), patch, now=self.clock())
        except Exception:
            # Release the row lock taken above.
            self.db.rollback()
            raise

        event_db.title = updated.title
        event_db.date = updated.date
        event_db.place = updated.place
        event_db.category = updated.category
        event_db.description = updated.description
        event_db.updated_at = updated.updated_at

        try:
            self.db.commit()
            self.db.refresh(event_db)
            logger.debug(f"Updated event {event_id}: {updated.title[:50]}")
            return event_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update event {event_id}: {type(e).__name__}: {str(e)}")
            raise

    def delete(self, event_id: str, caller_id: str) -> None:
        """Delete an event owned by ``caller_id``.

        Raises:
            NotFoundError: If the event does not exist
            ForbiddenError: If ``caller_id`` is not the owner
        """
        try:
            event_db = self._get_owned_for_update(event_id, caller_id)
        except Exception:
            self.db.rollback()
            raise

        try:
            self.db.delete(event_db)
            self.db.commit()
            logger.debug(f"Deleted event {event_id}")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete event {event_id}: {type(e).__name__}: {str(e)}")
            raise
