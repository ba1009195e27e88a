"""FastAPI dependencies for authentication."""

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from eventboard.models.user import Identity

# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


def get_current_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Identity:
    """Get the caller's identity from the bearer token.

    Raises:
        AuthError: If the token is missing, invalid or expired
    """
    token = credentials.credentials if credentials else None
    return request.app.state.session_validator.validate(token)
