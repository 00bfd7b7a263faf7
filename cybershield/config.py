"""Application configuration settings."""
from __future__ import annotations

import os
import re
from datetime import timedelta
from functools import lru_cache

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Runtime toggles -----------------------------------------------------
# Execution environment: "dev" | "staging" | "prod"
ENV = os.getenv("CYB_ENV", "dev").lower()

DEFAULT_DATABASE_URL = "sqlite:///cybershield.db"

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value: str | int) -> timedelta:
    """Parse ``3600`` / ``"45m"`` / ``"12h"`` / ``"7d"`` into a timedelta."""

    if isinstance(value, int):
        return timedelta(seconds=value)
    match = _DURATION_RE.match(value)
    if match is None:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _DURATION_UNITS[unit])


class Settings(BaseSettings):
    """Environment configuration for the CyberShield backend."""

    app_env: str = ENV
    database_url: str = DEFAULT_DATABASE_URL
    ALLOW_DB_CREATE_ALL: bool = False

    # --- Auth ------------------------------------------------------------
    JWT_SECRET: str | None = None
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_IN: str = "7d"
    BCRYPT_ROUNDS: int = Field(default=12, ge=12, le=16)

    # --- Email transport -------------------------------------------------
    RESEND_API_KEY: str | None = None
    GMAIL_USER: str | None = None
    GMAIL_APP_PASSWORD: str | None = None
    FROM_EMAIL: str | None = None
    ADMIN_EMAIL: str | None = None
    EMAIL_TIMEOUT_SECONDS: float = 10.0

    # --- HTTP ------------------------------------------------------------
    FRONTEND_URL: str = "http://localhost:5173"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    RATE_LIMIT_ENABLED: bool = True

    # --- Observability ---------------------------------------------------
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: str | None = None
    PROMETHEUS_ENABLED: bool = False

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator(
        "JWT_SECRET",
        "RESEND_API_KEY",
        "GMAIL_USER",
        "GMAIL_APP_PASSWORD",
        "FROM_EMAIL",
        "ADMIN_EMAIL",
        "SENTRY_DSN",
    )
    @classmethod
    def _strip_empty(cls, value: str | None) -> str | None:
        """Normalise empty strings to ``None`` so presence checks stay simple."""

        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None

    @field_validator("JWT_EXPIRES_IN")
    @classmethod
    def _check_duration(cls, value: str) -> str:
        parse_duration(value)
        return value

    @property
    def jwt_expires_delta(self) -> timedelta:
        return parse_duration(self.JWT_EXPIRES_IN)

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "prod"


class AppInfo(BaseModel):
    name: str = "cybershield-backend"
    version: str = "1.0.0"


settings = Settings()


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return settings


__all__ = [
    "ENV",
    "DEFAULT_DATABASE_URL",
    "Settings",
    "AppInfo",
    "parse_duration",
    "settings",
    "get_settings",
]
