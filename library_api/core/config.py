from functools import lru_cache
from typing import Any, Dict, List

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        # Unrelated environment variables are ignored
        extra="ignore",
    )

    # App config
    PROJECT_NAME: str = "Digital Library Management API"
    PROJECT_VERSION: str = "1.0.0"
    PROJECT_DESCRIPTION: str = (
        "A library management system with books, authors and contacts"
    )
    APP_ENV: str = "development"
    DEBUG: bool = True
    API_PREFIX: str = "/api"
    CONTACTS_PREFIX: str = "/contacts"
    DOCS_URL: str = "/api-docs"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./library.db"
    DB_ECHO: bool = False  # True to log every SQL statement
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 10

    # Lending
    LOAN_PERIOD_DAYS: int = 14

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 50

    # Security: tokens are issued by the external identity provider,
    # this service only verifies them.
    AUTH_ENABLED: bool = False
    SECRET_KEY: str = "secret-key-for-dev-only"
    ALGORITHM: str = "HS256"

    # CORS, comma separated
    BACKEND_CORS_ORIGINS: str = "*"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    LOG_DIR: str = "logs"

    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate app environment."""
        allowed_envs = {"development", "testing", "staging", "production"}
        if v not in allowed_envs:
            raise ValueError(f"APP_ENV must be one of: {', '.join(sorted(allowed_envs))}")
        return v

    @model_validator(mode="after")
    def set_debug_based_on_env(self) -> "Settings":
        """Set DEBUG based on APP_ENV."""
        if self.APP_ENV == "production":
            self.DEBUG = False
        return self

    @property
    def fastapi_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for the FastAPI constructor."""
        return {
            "debug": self.DEBUG,
            "title": self.PROJECT_NAME,
            "version": self.PROJECT_VERSION,
            "description": self.PROJECT_DESCRIPTION,
            "docs_url": self.DOCS_URL,
        }

    @property
    def cors_origins(self) -> List[str]:
        return [i.strip() for i in self.BACKEND_CORS_ORIGINS.split(",") if i.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.APP_ENV == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance
    """
    return Settings()
