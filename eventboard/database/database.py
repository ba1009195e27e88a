"""Database connection and session management for eventboard.

This module supports both:
- Local SQLite (default for dev)
- PostgreSQL or another server database via `DATABASE_URL`

Engines and session factories are built per application by ``create_app`` and
kept on ``app.state``; nothing here is a module-level singleton.
"""

import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from eventboard.config import Settings

logger = logging.getLogger(__name__)

# Base class for declarative models
Base = declarative_base()


def _is_sqlite_url(database_url: str) -> bool:
    return "sqlite" in (database_url or "")


def _is_sqlite_memory_url(database_url: str) -> bool:
    if not _is_sqlite_url(database_url):
        return False
    return ":memory:" in database_url or database_url.rstrip("/").endswith("sqlite:")


def get_engine_kwargs(database_url: str, settings: Settings = None) -> dict:
    """Return deterministic create_engine kwargs for a DB URL.

    This is separated to allow deterministic unit testing without connecting.
    """
    settings = settings or Settings()
    engine_kwargs: dict = {
        "echo": settings.debug,
        # Helps avoid stale DB connections.
        "pool_pre_ping": True,
    }

    if _is_sqlite_url(database_url):
        # SQLite-specific setting required for FastAPI concurrency in a single process.
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if _is_sqlite_memory_url(database_url):
            # One shared connection, otherwise every checkout sees an empty database.
            engine_kwargs["poolclass"] = StaticPool
        return engine_kwargs

    # Postgres / other DBs: keep pooling conservative.
    engine_kwargs["pool_size"] = settings.db_pool_size
    engine_kwargs["max_overflow"] = settings.db_max_overflow
    engine_kwargs["pool_timeout"] = settings.db_pool_timeout_sec
    return engine_kwargs


def set_sqlite_pragmas(dbapi_conn, connection_record):
    """Enable foreign keys and WAL mode on a new SQLite connection."""
    cursor = dbapi_conn.cursor()
    try:
        # Enable foreign keys (required for referential integrity)
        cursor.execute("PRAGMA foreign_keys=ON")
        # Enable WAL mode for better concurrency (allows concurrent reads during writes)
        cursor.execute("PRAGMA journal_mode=WAL")
    finally:
        cursor.close()


def build_engine(database_url: str, settings: Settings = None) -> Engine:
    engine = create_engine(database_url, **get_engine_kwargs(database_url, settings))
    if _is_sqlite_url(database_url):
        event.listen(engine, "connect", set_sqlite_pragmas)
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine, settings: Settings) -> None:
    """Initialize database schema.

    - SQLite (default dev): use `create_all()`.
    - Server databases: prefer Alembic migrations for deterministic schema.
      Enable by setting `RUN_MIGRATIONS=true` in the environment.
    """
    # Register models on Base.metadata.
    from eventboard.database import models  # noqa: F401

    if settings.run_migrations and not _is_sqlite_url(settings.database_url):
        from alembic import command
        from alembic.config import Config

        alembic_cfg = Config(settings.alembic_ini)
        # Ensure Alembic uses the same runtime DB URL.
        alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)
        logger.info("Running database migrations")
        command.upgrade(alembic_cfg, "head")
        return

    Base.metadata.create_all(bind=engine)


def get_db(request: Request) -> Iterator[Session]:
    """Get database session (dependency for FastAPI)."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
