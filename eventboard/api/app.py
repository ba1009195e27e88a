"""FastAPI web application for eventboard."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from eventboard import __version__
from eventboard.api.schemas import (
    EventCreateRequest,
    EventResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    SuccessResponse,
    UserOut,
)
from eventboard.auth.dependencies import get_current_identity
from eventboard.auth.sessions import SessionIssuer, SessionValidator
from eventboard.config import Settings
from eventboard.database.database import build_engine, build_session_factory, get_db, init_db
from eventboard.database.event_repository import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_PAGE, EventRepository
from eventboard.database.user_repository import UserRepository
from eventboard.errors import AuthError, EventBoardError, NotFoundError, ValidationError
from eventboard.models.event import EventListItem, EventPatch
from eventboard.models.user import Identity

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100

router = APIRouter()


def get_user_repository(request: Request, db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db, bcrypt_rounds=request.app.state.settings.bcrypt_rounds)


def get_event_repository(db: Session = Depends(get_db)) -> EventRepository:
    return EventRepository(db)


def get_session_issuer(request: Request, users: UserRepository = Depends(get_user_repository)) -> SessionIssuer:
    return SessionIssuer(users, request.app.state.settings)


@router.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@router.post("/api/register", response_model=SuccessResponse)
def register(body: RegisterRequest, users: UserRepository = Depends(get_user_repository)):
    """Register a new user."""
    user = users.register(body.firstname, body.lastname, body.email, body.password)
    logger.info(f"Registered user {user.id}")
    return SuccessResponse(message="Registration successful")


@router.post("/api/login", response_model=LoginResponse)
def login(body: LoginRequest, issuer: SessionIssuer = Depends(get_session_issuer)):
    """Log in and receive a bearer token."""
    if not body.email or not body.password:
        raise ValidationError("Missing required fields: email, password")
    result = issuer.login(body.email, body.password)
    return LoginResponse(
        token=result.token,
        user=UserOut(
            id=result.user.id,
            firstname=result.user.firstname,
            lastname=result.user.lastname,
            email=result.user.email,
        ),
    )


@router.get("/api/events", response_model=List[EventListItem])
def list_events(
    page: int = Query(DEFAULT_PAGE, ge=1, le=MAX_PAGE),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_PAGE_SIZE),
    q: Optional[str] = Query(None, description="Search title, description, place and category"),
    events: EventRepository = Depends(get_event_repository),
):
    """List public events, newest first."""
    return events.list(page=page, limit=limit, query=q)


@router.get("/api/events/{event_id}", response_model=EventListItem)
def get_event(event_id: str, events: EventRepository = Depends(get_event_repository)):
    """Get a single event."""
    event = events.get(event_id)
    if not event:
        raise NotFoundError("Event not found")
    return event


@router.post("/api/events", response_model=EventResponse)
def create_event(
    body: EventCreateRequest,
    identity: Identity = Depends(get_current_identity),
    events: EventRepository = Depends(get_event_repository),
):
    """Publish an event owned by the caller."""
    event = events.create(
        owner_id=identity.id,
        title=body.title,
        date=body.date,
        place=body.place,
        category=body.category,
        description=body.description,
    )
    return EventResponse(message="Event published", event=event)


@router.put("/api/events/{event_id}", response_model=EventResponse)
def update_event(
    event_id: str,
    body: EventPatch,
    identity: Identity = Depends(get_current_identity),
    events: EventRepository = Depends(get_event_repository),
):
    """Update an event (owner only). Omitted fields are left unchanged."""
    event = events.update(event_id, identity.id, body)
    return EventResponse(message="Event updated", event=event)


@router.delete("/api/events/{event_id}", response_model=SuccessResponse)
def delete_event(
    event_id: str,
    identity: Identity = Depends(get_current_identity),
    events: EventRepository = Depends(get_event_repository),
):
    """Delete an event (owner only)."""
    events.delete(event_id, identity.id)
    return SuccessResponse(message="Event deleted")


def _error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message}, headers=headers)


def install_error_handlers(app: FastAPI) -> None:
    """Map domain errors to HTTP responses; hide everything else behind a 500."""

    @app.exception_handler(EventBoardError)
    async def handle_domain_error(request: Request, exc: EventBoardError):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
        return _error_response(exc.status_code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
        message = "Invalid request"
        if fields:
            message = f"Invalid request: {', '.join(fields)}"
        return _error_response(400, message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error_response(500, "Internal server error")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application and its database handles."""
    settings = settings or Settings.from_env()

    engine = build_engine(settings.database_url, settings)
    init_db(engine, settings)

    app = FastAPI(
        title="eventboard API",
        description="Community events board: publish, browse and search events",
        version=__version__,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.session_validator = SessionValidator(settings)

    install_error_handlers(app)
    app.include_router(router)
    return app
