"""
Application settings.

Values come from environment variables or a local .env file.
"""

import logging
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration settings."""

    database_url: str = "sqlite:///./trinity.db"
    log_level: str = "INFO"
    default_activity_multiplier: float = 1.5  # Moderate activity

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for the API process."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
