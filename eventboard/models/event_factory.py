"""Event creation and patching for eventboard.

This module centralizes how events are built and changed so the repository
and any other persistence backend apply the same rules.
"""

import uuid
from datetime import datetime
from typing import Optional

from eventboard.errors import ValidationError
from eventboard.models.event import Event, EventPatch

REQUIRED_EVENT_FIELDS = ("title", "date", "place")
OPTIONAL_EVENT_FIELDS = ("category", "description")


def clean_text(value: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace; blank strings become None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def normalize_email(email: Optional[str]) -> Optional[str]:
    """Normalize an email for uniqueness comparison (stripped, lowercased)."""
    email = clean_text(email)
    return email.lower() if email else None


def create_event(
    owner_id: str,
    title: Optional[str],
    date: Optional[str],
    place: Optional[str],
    category: Optional[str] = None,
    description: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Event:
    """Build a new Event with a fresh id and creation timestamp.

    Raises:
        ValidationError: If title, date or place is missing or blank
    """
    fields = {
        "title": clean_text(title),
        "date": clean_text(date),
        "place": clean_text(place),
    }
    missing = [name for name in REQUIRED_EVENT_FIELDS if not fields[name]]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    now = now or datetime.utcnow()
    return Event(
        id=str(uuid.uuid4()),
        owner_id=owner_id,
        category=clean_text(category),
        description=clean_text(description),
        created_at=now,
        updated_at=now,
        **fields,
    )


def apply_event_patch(event: Event, patch: EventPatch, now: Optional[datetime] = None) -> Event:
    """Return a copy of ``event`` with the fields explicitly set on ``patch`` applied.

    Fields not present in the patch are left unchanged. A blank optional field
    clears it; a blank required field is rejected. ``id``, ``owner_id`` and
    ``created_at`` are never touched.

    Raises:
        ValidationError: If the patch blanks title, date or place
    """
    update = {}
    for name in patch.model_fields_set:
        value = clean_text(getattr(patch, name))
        if name in REQUIRED_EVENT_FIELDS and value is None:
            raise ValidationError(f"Field '{name}' cannot be empty")
        update[name] = value

    if not update:
        return event

    update["updated_at"] = now or datetime.utcnow()
    return event.model_copy(update=update)
