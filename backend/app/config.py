"""
Backend — Application Configuration
=====================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
       Fails fast if secrets are left at their placeholder outside local dev.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time.

Environment variables mirror the ones documented in the development guide
(DOMAIN, ENVIRONMENT, SECRET_KEY, FIRST_SUPERUSER_PASSWORD, POSTGRES_*, SMTP_*).
The same names work in `.env`, in docker compose, and in the shell.
"""

import secrets
import warnings
from typing import List, Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

# Placeholder shipped in the template's .env; must be replaced outside local dev
DEFAULT_SECRET = "changethis"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for `fastapi dev`/uvicorn on a laptop
    with a local PostgreSQL. Staging and production deployments MUST override
    SECRET_KEY, POSTGRES_PASSWORD and FIRST_SUPERUSER_PASSWORD.
    """

    # ── Project ───────────────────────────────────────────────────────────
    project_name: str = Field(default="Full Stack FastAPI Project")
    api_v1_str: str = Field(default="/api/v1")

    # What: Deployment stage. Controls URL scheme, private routes and secret checks
    environment: Literal["local", "staging", "production"] = Field(default="local")

    # What: Base domain. "localhost" selects port-based URLs; anything else
    # selects subdomain routing through the reverse proxy (api., dashboard.)
    domain: str = Field(default="localhost")

    # ── Security ──────────────────────────────────────────────────────────
    # Random per process unless configured: tokens do not survive a restart
    secret_key: str = Field(default_factory=lambda: secrets.token_urlsafe(32))

    # 60 minutes * 24 hours * 8 days = 8 days
    access_token_expire_minutes: int = Field(default=60 * 24 * 8, ge=1)
    email_reset_token_expire_hours: int = Field(default=48, ge=1)

    # ── Frontend / CORS ───────────────────────────────────────────────────
    frontend_host: str = Field(default="http://localhost:5173")

    # Format: comma-separated URLs (parsed by cors_origins_list)
    backend_cors_origins: str = Field(default="")

    @property
    def cors_origins_list(self) -> List[str]:
        """Configured origins plus the frontend host, without trailing slashes."""
        origins = [
            origin.strip().rstrip("/")
            for origin in self.backend_cors_origins.split(",")
            if origin.strip()
        ]
        origins.append(self.frontend_host.rstrip("/"))
        # dict.fromkeys keeps first-seen order
        return list(dict.fromkeys(origins))

    # ── Database ──────────────────────────────────────────────────────────
    postgres_server: str = Field(default="localhost")
    postgres_port: int = Field(default=5432, ge=1, le=65535)
    postgres_user: str = Field(default="postgres")
    postgres_password: str = Field(default="")
    postgres_db: str = Field(default="app")

    # What: Full async URL override (tests use sqlite+aiosqlite)
    database_url: Optional[str] = Field(default=None)

    db_pool_size: int = Field(default=20, ge=5, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    @property
    def sqlalchemy_database_uri(self) -> str:
        """
        What: The async SQLAlchemy URL used by the engine and Alembic.
        How:  DATABASE_URL wins when set; otherwise built from POSTGRES_* parts.
        """
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_server}:{self.postgres_port}/{self.postgres_db}"
        )

    # ── SMTP ──────────────────────────────────────────────────────────────
    # In local development these point at the mail catcher (SMTP port 1025)
    smtp_tls: bool = Field(default=True)
    smtp_ssl: bool = Field(default=False)
    smtp_port: int = Field(default=587, ge=1, le=65535)
    smtp_host: Optional[str] = Field(default=None)
    smtp_user: Optional[str] = Field(default=None)
    smtp_password: Optional[str] = Field(default=None)
    emails_from_email: Optional[str] = Field(default=None)
    emails_from_name: Optional[str] = Field(default=None)
    smtp_timeout: int = Field(default=30, ge=1, le=300)

    email_test_user: str = Field(default="test@example.com")

    @property
    def emails_enabled(self) -> bool:
        return bool(self.smtp_host and self.emails_from_email)

    # ── First superuser ───────────────────────────────────────────────────
    first_superuser: str = Field(default="admin@example.com")
    first_superuser_password: str = Field(default=DEFAULT_SECRET)

    # ── Prestart ──────────────────────────────────────────────────────────
    # 60 * 5 tries, 1 second apart = wait up to 5 minutes for the database
    db_connect_max_tries: int = Field(default=60 * 5, ge=1)
    db_connect_wait_seconds: int = Field(default=1, ge=0)

    # ── Service directory ports ───────────────────────────────────────────
    frontend_port: int = Field(default=5173, ge=1, le=65535)
    adminer_port: int = Field(default=8080, ge=1, le=65535)
    proxy_dashboard_port: int = Field(default=8090, ge=1, le=65535)
    mailcatcher_port: int = Field(default=1080, ge=1, le=65535)

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1, le=65535)

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

    @model_validator(mode="after")
    def _set_default_emails_from(self) -> "Settings":
        if not self.emails_from_name:
            self.emails_from_name = self.project_name
        return self

    @model_validator(mode="after")
    def _enforce_non_default_secrets(self) -> "Settings":
        """
        What:  Refuses placeholder secrets outside local development.
        When:  At settings construction, so a misconfigured deploy never boots.
        How:   Local → warning only; staging/production → ValueError.
        """
        self._check_default_secret("SECRET_KEY", self.secret_key)
        self._check_default_secret("POSTGRES_PASSWORD", self.postgres_password)
        self._check_default_secret(
            "FIRST_SUPERUSER_PASSWORD", self.first_superuser_password
        )
        return self

    def _check_default_secret(self, var_name: str, value: Optional[str]) -> None:
        if value != DEFAULT_SECRET:
            return
        message = (
            f'The value of {var_name} is "{DEFAULT_SECRET}", '
            "for security, please change it, at least for deployments."
        )
        if self.environment == "local":
            warnings.warn(message, stacklevel=1)
        else:
            raise ValueError(message)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # DATABASE_URL and database_url both work
        "extra": "ignore",  # the shared .env also carries frontend/compose vars
    }


settings = Settings()
