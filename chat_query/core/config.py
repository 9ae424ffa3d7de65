"""Configuration management for chat query codec."""

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    LOG_LEVEL: str = "INFO"

    # Decode presence policy. Encoding always writes `stream`, so requiring it
    # on decode is safe for payloads this package produced. `function_call` is
    # omitted on encode when no directive is set, so it stays optional.
    DECODE_REQUIRE_STREAM: bool = True
    DECODE_REQUIRE_FUNCTION_CALL: bool = False

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that LOG_LEVEL names a standard logging level."""
        if not isinstance(v, str):
            raise ValueError("LOG_LEVEL must be a string")
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"LOG_LEVEL must be a logging level name, got {v!r}")
        return level


# Create global settings instance
settings = Settings()
