"""Runtime configuration for eventboard.

Values come from the environment (optionally a ``.env`` file loaded with
python-dotenv). ``create_app`` takes a ``Settings`` instance so tests can build
an app without touching the environment.
"""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from eventboard.auth.passwords import DEFAULT_BCRYPT_ROUNDS

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_JWT_SECRET_KEY = "change-me-in-production"


def _env_bool(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings(BaseModel):
    """Application settings."""

    database_url: str = Field("sqlite:///./eventboard.db", description="SQLAlchemy database URL")
    jwt_secret_key: str = Field(DEFAULT_JWT_SECRET_KEY, description="HMAC key used to sign session tokens")
    jwt_algorithm: str = Field("HS256", description="JWT signing algorithm")
    jwt_expiration_days: int = Field(7, ge=1, description="Session token lifetime in days")
    bcrypt_rounds: int = Field(DEFAULT_BCRYPT_ROUNDS, ge=4, le=31, description="bcrypt cost factor")
    debug: bool = Field(False, description="Echo SQL statements")
    db_pool_size: int = Field(5, ge=1)
    db_max_overflow: int = Field(5, ge=0)
    db_pool_timeout_sec: int = Field(30, ge=1)
    run_migrations: bool = Field(False, description="Run Alembic migrations on startup (non-SQLite only)")
    alembic_ini: str = Field("alembic.ini", description="Path to alembic.ini")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        settings = cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///./eventboard.db"),
            jwt_secret_key=os.getenv("JWT_SECRET_KEY", DEFAULT_JWT_SECRET_KEY),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_expiration_days=int(os.getenv("JWT_EXPIRATION_DAYS", "7")),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", str(DEFAULT_BCRYPT_ROUNDS))),
            debug=_env_bool("DEBUG"),
            db_pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
            db_max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "5")),
            db_pool_timeout_sec=int(os.getenv("DB_POOL_TIMEOUT_SEC", "30")),
            run_migrations=_env_bool("RUN_MIGRATIONS"),
            alembic_ini=os.getenv("ALEMBIC_INI", "alembic.ini"),
        )
        if settings.jwt_secret_key == DEFAULT_JWT_SECRET_KEY:
            logger.warning("JWT_SECRET_KEY is not set; using the development default")
        return settings
