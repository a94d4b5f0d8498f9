"""
Application configuration.

Values come from the environment (and a local .env file). Everything is
validated once at import; a bad value stops the process at startup.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()

MIN_SECRET_KEY_LENGTH = 32


class Settings(BaseSettings):
    """Physiqube API settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    # Database: DATABASE_URL wins (e.g. sqlite:// for tests), else built from POSTGRES_*
    DATABASE_URL: Optional[str] = Field(default=None)
    POSTGRES_USER: str = Field(default="postgres")
    POSTGRES_PASSWORD: str = Field(default="postgres")
    POSTGRES_DB: str = Field(default="physiqube")
    POSTGRES_HOST: str = Field(default="postgres")
    POSTGRES_PORT: int = Field(default=5432)

    DB_POOL_SIZE: int = Field(default=10, ge=1)
    DB_MAX_OVERFLOW: int = Field(default=10, ge=0)
    DB_POOL_TIMEOUT: int = Field(default=30, ge=1)  # seconds
    DB_POOL_RECYCLE: int = Field(default=1800)  # seconds

    # Bearer token validation. Tokens are issued by the identity service with the same key.
    SECRET_KEY: str = Field(
        default=...,
        description="JWT verification key, at least 32 characters. "
                    "Generate with: python -c \"import secrets; print(secrets.token_urlsafe(32))\""
    )
    JWT_ALGORITHM: str = Field(default="HS256")

    # Server
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=8000)
    API_RELOAD: bool = Field(default=False)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="json")  # json or text

    # Window used by metrics history queries that omit start_date
    HISTORY_DEFAULT_DAYS: int = Field(default=90, ge=1)

    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)

    # Comma-separated allowed origins, e.g. "https://app.physiqube.run"
    CORS_ORIGINS: Optional[str] = Field(default=None)

    @field_validator("SECRET_KEY")
    @classmethod
    def _secret_key_strength(cls, value: str) -> str:
        if len(value) < MIN_SECRET_KEY_LENGTH:
            raise ValueError(f"SECRET_KEY must be at least {MIN_SECRET_KEY_LENGTH} characters")
        return value

    @field_validator("LOG_FORMAT")
    @classmethod
    def _log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("json", "text"):
            raise ValueError("LOG_FORMAT must be 'json' or 'text'")
        return value

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def cors_origins(self) -> List[str]:
        if not self.CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
