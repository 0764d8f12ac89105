"""
Users API — Application Configuration
=======================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; validated before the app starts.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development against a
    MongoDB instance on localhost. Attributes are grouped by concern.
    """

    # ── Document Store ────────────────────────────────────────────────────
    # What: Connection target for the user store. The URL scheme selects
    # the backend (see users_api.stores.create_store):
    #   mongodb://host:port/db               → MongoUserStore (motor)
    #   postgresql+asyncpg://user:pw@host/db → SqlUserStore (async SQLAlchemy)
    #   sqlite+aiosqlite:///./users.db       → SqlUserStore
    database_url: str = Field(
        default="mongodb://127.0.0.1:27017/users",
        description="Document store connection URL",
    )

    # Database name used when the Mongo URL carries no path component
    mongo_database: str = Field(default="users")

    # How long motor waits to find a usable server before failing an operation
    mongo_server_selection_timeout_ms: int = Field(default=5000, ge=100, le=60_000)

    # SQL pool sizing; ignored for SQLite, which has no server-side pool
    db_pool_size: int = Field(default=20, ge=1, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # ── Startup Connection Retry ──────────────────────────────────────────
    # What: Tenacity policy for the store connection made during startup.
    # After the last attempt fails the process refuses to start.
    store_connect_attempts: int = Field(default=5, ge=1, le=20)
    store_connect_min_wait: int = Field(default=1, ge=0, le=30)
    store_connect_max_wait: int = Field(default=10, ge=1, le=120)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs (parsed by the property below)
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=3000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Rejects empty or scheme-less URLs before any connection is attempted."""
        if "://" not in v:
            raise ValueError(
                f"Invalid database_url '{v}'. Expected a URL such as "
                "mongodb://127.0.0.1:27017/users or sqlite+aiosqlite:///./users.db"
            )
        return v

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # DATABASE_URL and database_url both work
        "extra": "ignore",
    }


# Singleton instance, imported throughout the application
settings = Settings()
