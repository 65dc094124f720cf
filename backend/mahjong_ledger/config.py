"""Application configuration using Pydantic BaseSettings."""

import logging
import os
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mahjong_ledger.models.common import StoreBackend

logger = logging.getLogger("mahjong_ledger.config")

# Development-only default for JWT_SECRET
_DEV_JWT_SECRET = "dev-secret-key-change-in-production-min-32-characters-long"

SETTLEUP_DATABASE_URLS = {
    "sandbox": "https://settle-up-sandbox.firebaseio.com",
    "live": "https://settle-up-live.firebaseio.com",
}


def _is_production() -> bool:
    return os.getenv("APP_ENV") == "production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # Application Metadata
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # Authentication
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"
    JWT_SECRET: Optional[str] = Field(default=None, validate_default=True)
    SESSION_HOURS: int = 12

    # CORS Configuration
    # Comma-separated list of allowed origins, or "*" for all origins
    CORS_ORIGINS: str = ""

    # Game record store
    STORE_BACKEND: StoreBackend = StoreBackend.SHEETS

    # MongoDB (STORE_BACKEND=mongo)
    MONGO_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "mahjong_ledger"

    # Google Sheets (STORE_BACKEND=sheets)
    GOOGLE_SERVICE_ACCOUNT_EMAIL: str = ""
    GOOGLE_PRIVATE_KEY: str = ""
    GOOGLE_SHEET_ID: str = ""
    GAMES_SHEET_NAME: str = "Sheet1"
    PLAYERS_SHEET_NAME: str = "Players"
    GAMES_SHEET_HAS_HEADER: bool = True

    # Settle Up ledger
    SETTLEUP_ENV: str = "sandbox"
    SETTLEUP_API_KEY: str = ""
    SETTLEUP_EMAIL: str = ""
    SETTLEUP_PASSWORD: str = ""
    SETTLEUP_GROUP_ID: str = ""
    SETTLEUP_CURRENCY_CODE: str = "CAD"
    # "roster" maps names via the Players sheet, "members" via the group itself
    SETTLEUP_DIRECTORY_SOURCE: str = "roster"

    # Outbound HTTP
    HTTP_TIMEOUT_SECONDS: float = 10.0

    @field_validator("JWT_SECRET", mode="before")
    @classmethod
    def validate_jwt_secret(cls, v):
        """Validate JWT_SECRET and provide development default with warning."""
        if v is None or v == "":
            if _is_production():
                raise ValueError(
                    "JWT_SECRET must be set in production. "
                    "This is a critical security requirement."
                )
            logger.warning(
                "JWT_SECRET not set! Using development default. "
                "This is INSECURE for production. "
                "Set JWT_SECRET environment variable."
            )
            return _DEV_JWT_SECRET
        return v

    @field_validator("SETTLEUP_ENV")
    @classmethod
    def validate_settleup_env(cls, v: str) -> str:
        """Unknown environments fall back to the sandbox."""
        if v not in SETTLEUP_DATABASE_URLS:
            logger.warning("Unknown SETTLEUP_ENV %r, using sandbox", v)
            return "sandbox"
        return v

    @field_validator("SETTLEUP_DIRECTORY_SOURCE")
    @classmethod
    def validate_directory_source(cls, v: str) -> str:
        if v not in ("roster", "members"):
            raise ValueError("SETTLEUP_DIRECTORY_SOURCE must be 'roster' or 'members'")
        return v

    @property
    def settleup_database_url(self) -> str:
        return SETTLEUP_DATABASE_URLS[self.SETTLEUP_ENV]

    @property
    def cors_origins(self) -> list[str]:
        """Return list of allowed CORS origins.

        If CORS_ORIGINS is empty, allows the local dev servers in
        development but returns empty in production.
        """
        if self.CORS_ORIGINS:
            if self.CORS_ORIGINS == "*":
                return ["*"]
            return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

        if _is_production():
            logger.warning(
                "CORS_ORIGINS not configured in production. "
                "Set CORS_ORIGINS environment variable."
            )
            return []

        # Development defaults
        return [
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ]


# Global settings instance
settings = Settings()
