"""
Configuration settings using Pydantic.

Loads settings from environment variables and .env file.
"""

from functools import lru_cache
from typing import Dict, List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./prosperity.db"

    # Authentication
    basic_auth_username: str = "cpi"
    basic_auth_password: str = "change-this-password"
    extra_users: Dict[str, str] = {}  # username -> password, as JSON in the environment

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    calculation_log_dir: str = ""  # empty disables per-city calculation logs

    # Scores are stored with this many decimal places
    score_precision: int = 2

    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    @property
    def async_database_url(self) -> str:
        """Convert database URL to async version if needed."""
        url = self.database_url
        if url.startswith("sqlite://"):
            return url.replace("sqlite://", "sqlite+aiosqlite://")
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+asyncpg://")
        return url

    @property
    def users(self) -> Dict[str, str]:
        """All accounts allowed to sign in."""
        accounts = dict(self.extra_users)
        accounts[self.basic_auth_username] = self.basic_auth_password
        return accounts


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
