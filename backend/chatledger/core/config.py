"""
Application configuration using Pydantic Settings.

Values are read from environment variables and an optional .env file.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local", "test", "production"] = "local"
    DEBUG: bool = False

    # ===========================================
    # Database
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./chatledger.db"

    # ===========================================
    # Auth (Clerk / JWT)
    # ===========================================
    # "mock" treats the bearer token as the user id (development only)
    AUTH_PROVIDER: Literal["mock", "clerk"] = "mock"
    CLERK_JWKS_URL: str = ""
    # Derived from CLERK_JWKS_URL when empty
    CLERK_ISSUER: str = ""
    CLERK_AUDIENCE: str = ""
    CLERK_JWKS_TTL_SECONDS: int = 300

    # ===========================================
    # Image uploads (ImageKit)
    # ===========================================
    IMAGE_KIT_ENDPOINT: str = ""
    IMAGE_KIT_PUBLIC_KEY: str = ""
    IMAGE_KIT_PRIVATE_KEY: str = ""
    UPLOAD_TOKEN_TTL_SECONDS: int = 60 * 40

    # ===========================================
    # Chats
    # ===========================================
    TITLE_MAX_LENGTH: int = 40

    # ===========================================
    # Index reconciliation
    # ===========================================
    INDEX_RECONCILE_ENABLED: bool = True
    INDEX_RECONCILE_INTERVAL_MINUTES: int = 15
    INDEX_RECONCILE_BATCH_SIZE: int = 200

    # ===========================================
    # Server
    # ===========================================
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CLIENT_URL: str = ""
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:5173"]
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def _use_async_driver(cls, value: str) -> str:
        # Hosted Postgres URLs come without a driver suffix
        for prefix in ("postgres://", "postgresql://"):
            if value.startswith(prefix):
                return value.replace(prefix, "postgresql+asyncpg://", 1)
        return value

    @property
    def cors_origins(self) -> List[str]:
        """Allowed CORS origins, including CLIENT_URL when set."""
        origins = list(self.ALLOWED_ORIGINS)
        if self.CLIENT_URL:
            client_url = self.CLIENT_URL.rstrip("/")
            if client_url not in origins:
                origins.append(client_url)
        return origins

    @property
    def is_test(self) -> bool:
        """Check if running under the test suite."""
        return self.ENVIRONMENT == "test"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
