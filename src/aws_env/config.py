"""Runtime settings for aws-env."""

from datetime import timedelta
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .durations import parse_duration


class Settings(BaseSettings):
    """Settings read from ``AWS_ENV_*`` environment variables or a ``.env`` file."""

    model_config = SettingsConfigDict(
        env_prefix="AWS_ENV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_format: Optional[str] = Field(
        default=None, description="Shell dialect to use instead of autodetection"
    )
    fallback_format: str = Field(
        default="bash", description="Dialect used when autodetection finds nothing"
    )
    default_duration: timedelta = Field(
        default=timedelta(minutes=15), description="Validity of assumed role credentials"
    )
    role_session_name: str = Field(
        default="aws-env", description="Prefix of the STS role session name"
    )
    log_level: str = Field(default="WARNING")

    @field_validator("default_duration", mode="before")
    @classmethod
    def _parse_duration(cls, value):
        if isinstance(value, str):
            return parse_duration(value)
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()


@lru_cache()
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
