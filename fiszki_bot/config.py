"""Configuration settings using pydantic-settings."""
from typing import Optional

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

    # Telegram Bot
    BOT_TOKEN: str = Field(default="", description="Telegram Bot API token")
    ADMIN_ID: Optional[int] = Field(
        default=None,
        description="Telegram user allowed to run /count and /reset_cards"
    )

    # Database
    DATABASE_PATH: str = Field(
        default="data/fiszki.db",
        description="Path to SQLite database file"
    )

    # Lessons
    DECOY_PLACEHOLDER: str = Field(
        default="Brak odpowiedzi",
        description="Text shown in place of a missing decoy answer"
    )

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    @field_validator("ADMIN_ID", mode="before")
    @classmethod
    def _blank_admin_id(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


# Lesson id -> button label
LESSONS = {
    1: "Lekcja 1: Zwierzęta",
    2: "Lekcja 2: Powitania",
}


# Global settings instance
settings = Settings()
