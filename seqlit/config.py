"""Configuration management with Pydantic settings."""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MalformedPolicy(str, Enum):
    """How record readers treat a line that cannot be decoded."""

    ABORT = "abort"
    SKIP = "skip"


class Settings(BaseSettings):
    """seqlit configuration settings.

    Precedence: CLI flag > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="SEQLIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    on_malformed: MalformedPolicy = Field(
        default=MalformedPolicy.ABORT,
        description="Policy for undecodable input lines, applied by every command",
    )

    log_level: str = Field(
        default="WARNING",
        description="Logging level for diagnostics written to stderr",
    )

    fsync: bool = Field(
        default=True,
        description="fsync temporary output before renaming it into place",
    )

    encoding: str = Field(
        default="utf-8",
        description="Text encoding of raw and NDJSON input files",
    )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
