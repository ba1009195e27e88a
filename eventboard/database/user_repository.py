"""Repository for User database operations (the credential store)."""

import logging
from datetime import datetime
from typing import Callable, Optional
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventboard.auth.passwords import DEFAULT_BCRYPT_ROUNDS, hash_password, password_too_long, verify_password
from eventboard.database.models import UserDB
from eventboard.errors import AuthError, ConflictError, ValidationError
from eventboard.models.event_factory import clean_text, normalize_email
from eventboard.models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, db: Session, bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS, clock: Callable[[], datetime] = datetime.utcnow):
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds
        self.clock = clock

    def get(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        user_db = self.db.query(UserDB).filter(UserDB.id == user_id).first()
        return user_db.to_pydantic() if user_db else None

    def _get_db_by_email(self, email: Optional[str]) -> Optional[UserDB]:
        normalized = normalize_email(email)
        if not normalized:
            return None
        return self.db.query(UserDB).filter(UserDB.email == normalized).first()

    def find_by_email(self, email: str) -> Optional[User]:
        """Get user by email (case-insensitive)."""
        user_db = self._get_db_by_email(email)
        return user_db.to_pydantic() if user_db else None

    def register(self, firstname: str, lastname: str, email: str, password: str) -> User:
        """Create a new user with a hashed password.

        Args:
            firstname: First name
            lastname: Last name
            email: Login email (stored normalized)
            password: Plain-text password; only its bcrypt hash is stored

        Returns:
            Created User object

        Raises:
            ValidationError: If a field is missing or the password is too long
            ConflictError: If the normalized email is already registered
        """
        fields = {
            "firstname": clean_text(firstname),
            "lastname": clean_text(lastname),
            "email": normalize_email(email),
        }
        missing = [name for name, value in fields.items() if not value]
        if not password:
            missing.append("password")
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        if password_too_long(password):
            raise ValidationError("Password is too long")

        if self._get_db_by_email(fields["email"]):
            raise ConflictError("Email already registered")

        user_db = UserDB(
            id=str(uuid.uuid4()),
            password_hash=hash_password(password, rounds=self.bcrypt_rounds),
            created_at=self.clock(),
            **fields,
        )
        try:
            self.db.add(user_db)
            self.db.commit()
            self.db.refresh(user_db)
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email.
            self.db.rollback()
            raise ConflictError("Email already registered")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create user {user_db.id}: {type(e).__name__}: {str(e)}")
            raise
        logger.debug(f"Created user {user_db.id}")
        return user_db.to_pydantic()

    def authenticate(self, email: str, password: str) -> User:
        """Verify credentials and return the matching user.

        Raises:
            AuthError: ``unknown_identity`` if no user has this email,
                ``bad_secret`` if the password does not match
        """
        user_db = self._get_db_by_email(email)
        if not user_db:
            raise AuthError("unknown_identity")
        if not verify_password(password or "", user_db.password_hash):
            raise AuthError("bad_secret")
        return user_db.to_pydantic()
