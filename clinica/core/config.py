"""
Application settings loaded from environment variables (and an optional .env file).
"""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    MODE: str = "development"  # 'development', 'production', 'test'
    DEBUG: bool = False

    # Database
    DATABASE_INTERNAL_URL: str = "sqlite+aiosqlite:///./clinica.db"
    DATABASE_EXTERNAL_URL: str = "sqlite+aiosqlite:///./clinica.db"

    # Auth
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Clinic
    CLINIC_TIMEZONE: str = "America/Mexico_City"

    # Observability
    LOG_LEVEL: str = "INFO"
    SLOW_REQUEST_THRESHOLD: float = 1.0  # seconds
    SENTRY_DSN: Optional[str] = None
    SENTRY_ENVIRONMENT: Optional[str] = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    CORS_ORIGINS: List[str] = ["*"]


settings = Settings()
