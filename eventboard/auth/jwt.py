"""JWT token generation and validation for eventboard."""

from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt

from eventboard.config import Settings
from eventboard.errors import AuthError
from eventboard.models.user import Identity, User

REQUIRED_CLAIMS = ["sub", "iat", "exp", "firstname", "lastname", "email"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(user: User, settings: Settings, now: Optional[datetime] = None) -> Tuple[str, datetime]:
    """Create a JWT access token for a user.

    Args:
        user: User whose identity is embedded in the token
        settings: Signing key, algorithm and lifetime
        now: Issuance time (defaults to the current UTC time)

    Returns:
        Tuple of (encoded token, expiry time)
    """
    issued_at = now or _utcnow()
    expires_at = issued_at + timedelta(days=settings.jwt_expiration_days)
    payload = {
        "sub": user.id,  # Subject (user ID)
        "firstname": user.firstname,
        "lastname": user.lastname,
        "email": user.email,
        "iat": int(issued_at.timestamp()),  # Issued at
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return token, expires_at


def decode_access_token(token: str, settings: Settings, now: Optional[datetime] = None) -> Identity:
    """Decode and validate a JWT access token.

    The signature is checked by PyJWT; expiry is checked here against ``now``
    so callers can pin the clock.

    Args:
        token: JWT token string to decode
        settings: Signing key and algorithm
        now: Validation time (defaults to the current UTC time)

    Returns:
        Identity embedded in the token

    Raises:
        AuthError: ``invalid`` for a malformed or badly signed token,
            ``expired`` once ``now`` reaches the token's expiry
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"verify_exp": False, "verify_iat": False, "require": REQUIRED_CLAIMS},
        )
    except jwt.InvalidTokenError:
        raise AuthError("invalid")

    exp = payload["exp"]
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        raise AuthError("invalid")
    if (now or _utcnow()).timestamp() >= exp:
        raise AuthError("expired")

    try:
        return Identity(
            id=payload["sub"],
            firstname=payload["firstname"],
            lastname=payload["lastname"],
            email=payload["email"],
        )
    except (TypeError, ValueError):
        raise AuthError("invalid")
