"""
Application configuration.

Loads settings from environment variables (and .env) with sensible
defaults. The JWT signing key has no default: the app refuses to start
without one.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # ==========================================================================
    # API Server
    # ==========================================================================

    api_host: str = "0.0.0.0"
    api_port: int = 3000
    cors_origins: str = "*"

    # ==========================================================================
    # Authentication
    # ==========================================================================

    jwt_secret_key: str = ""
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60
    password_hash_iterations: int = 100_000

    # ==========================================================================
    # Storage
    # ==========================================================================

    storage_backend: str = "memory"  # memory | mongo
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_database: str = "node-ecommerce"
    seed_on_startup: bool = False

    # ==========================================================================
    # Optional Services
    # ==========================================================================

    sentry_dsn: str = ""

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
