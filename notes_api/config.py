"""
Application Configuration

Centralized configuration management using Pydantic settings.
Loads from environment variables with fallback to .env file.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Note: get_settings() is cached, but create_app() accepts an explicit
    Settings instance, so tests build their own instead of clearing the cache.
    """

    # Database settings
    DATABASE_URL: str = "sqlite:///./notes.db"
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 40
    CREATE_TABLES: bool = True

    # Security settings
    JWT_SECRET: str = "dev-secret-key-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_MINUTES: int = 60 * 24

    # Redis backs the rate limiter; leave unset to disable rate limiting
    REDIS_URL: Optional[str] = None

    # Rate limiting (per client IP)
    RATE_LIMIT_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60

    # Application settings
    CORS_ORIGINS: List[str] = ["*"]
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    PORT: int = 5000

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
