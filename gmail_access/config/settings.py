"""Configuration management using Pydantic Settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Gmail hard limits
MAX_BATCH_SIZE = 1000
MAX_RESULTS_LIMIT = 100


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: Literal["development", "production", "testing"] = Field(default="development", alias="APP_ENV")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )
    log_format: Literal["json", "console"] = Field(default="json", alias="LOG_FORMAT")

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_level(cls, v: str) -> str:
        """Accept lowercase level names."""
        return v.upper() if isinstance(v, str) else v


class GmailConfig(BaseSettings):
    """Gmail API configuration."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    credentials_path: Path = Field(default=Path("secrets/gmail_credentials.json"), alias="GMAIL_CREDENTIALS_PATH")
    token_path: Path = Field(default=Path("secrets/gmail_token.json"), alias="GMAIL_TOKEN_PATH")
    # Comma separated, short names (gmail.modify) or full scope URLs
    scopes: str = Field(default="gmail.readonly", alias="GMAIL_SCOPES")
    user_id: str = Field(default="me", alias="GMAIL_USER_ID")
    default_max_results: int = Field(default=10, ge=1, le=MAX_RESULTS_LIMIT, alias="GMAIL_DEFAULT_MAX_RESULTS")
    max_attachment_size_mb: int = Field(default=25, ge=1, alias="GMAIL_MAX_ATTACHMENT_SIZE_MB")

    # Send text/html bodies as multipart/alternative with a derived text/plain part
    html_plain_alternative: bool = Field(default=False, alias="GMAIL_HTML_PLAIN_ALTERNATIVE")

    @field_validator("credentials_path", "token_path", mode="before")
    @classmethod
    def validate_path(cls, v: str | Path) -> Path:
        """Convert string to Path."""
        return Path(v) if isinstance(v, str) else v

    @property
    def max_attachment_size_bytes(self) -> int:
        return self.max_attachment_size_mb * 1024 * 1024


class Settings(BaseSettings):
    """Master settings combining all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app: AppConfig = Field(default_factory=AppConfig)
    gmail: GmailConfig = Field(default_factory=GmailConfig)


# Global settings instance
settings = Settings()
