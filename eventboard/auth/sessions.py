"""Session issuance and validation for eventboard.

Sessions are stateless JWTs: there is no server-side session table and no
revocation list. A token stays valid until its expiry even if the user's
record changes afterwards; the validator trusts the claims as of issuance.
"""

import logging
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from eventboard.auth.jwt import create_access_token, decode_access_token
from eventboard.config import Settings
from eventboard.database.user_repository import UserRepository
from eventboard.errors import AuthError
from eventboard.models.event_factory import normalize_email
from eventboard.models.user import Identity, User

logger = logging.getLogger(__name__)


class LoginResult(BaseModel):
    """Successful login: a signed token plus the public user fields."""

    token: str
    expires_at: datetime
    user: User


class SessionIssuer:
    """Verifies credentials and mints session tokens."""

    def __init__(self, users: UserRepository, settings: Settings):
        self.users = users
        self.settings = settings

    def login(self, email: str, password: str, now: Optional[datetime] = None) -> LoginResult:
        """Authenticate a user and issue a token.

        Raises:
            AuthError: ``unknown_identity`` or ``bad_secret``; both carry the
                same caller-facing message
        """
        try:
            user = self.users.authenticate(email, password)
        except AuthError as e:
            logger.info(f"Login failed for {normalize_email(email)!r}: {e.reason}")
            raise
        token, expires_at = create_access_token(user, self.settings, now=now)
        logger.debug(f"Issued session token for user {user.id}")
        return LoginResult(token=token, expires_at=expires_at, user=user)


class SessionValidator:
    """Checks a presented token and returns the caller's identity.

    Has no side effects and performs no store lookup.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def validate(self, token: Optional[str], now: Optional[datetime] = None) -> Identity:
        """Validate a token.

        Raises:
            AuthError: ``missing``, ``invalid`` or ``expired``
        """
        if not token:
            raise AuthError("missing")
        return decode_access_token(token, self.settings, now=now)
