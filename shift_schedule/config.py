"""
Configuration settings for the Shift Schedule record manager.

Uses Pydantic Settings to load environment variables for the database file,
logging, credential hashing and the optional overrides document.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    db_path: Optional[Path] = Field(None, alias="SHIFT_DB_PATH")
    db_engine: Optional[str] = Field(None, alias="SHIFT_DB_ENGINE")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Credentials
    credentials_table: str = Field("Users", alias="SHIFT_CREDENTIALS_TABLE")
    password_salt: str = Field("ShiftScheduleSalt", alias="SHIFT_PASSWORD_SALT")
    min_password_length: int = Field(6, alias="SHIFT_MIN_PASSWORD_LENGTH")

    # Domain overrides (JSON document, see shift_schedule.domain.overrides)
    overrides_file: Optional[Path] = Field(None, alias="SHIFT_OVERRIDES_FILE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
