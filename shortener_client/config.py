"""Configuration management for the shortener client."""

from typing import Literal, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Client configuration."""

    # Backend settings
    backend_url: str = Field(
        default="http://localhost:8000/api/v1",
        description="Base URL of the link-shortening backend"
    )

    request_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout applied to every backend request"
    )

    qr_code_path: str = Field(
        default="/url/qrcode/{link_id}",
        description="Path of the QR code endpoint, relative to backend_url"
    )

    # Session settings
    access_token: Optional[str] = Field(
        default=None,
        description="Session token issued at login (sent as cookie and bearer header)"
    )

    auth_cookie_name: str = Field(
        default="accessToken",
        description="Name of the session cookie the backend expects"
    )

    # Link store settings
    duplicate_delete_policy: Literal["coalesce", "reject"] = Field(
        default="coalesce",
        description="How a second delete of a link already being deleted is handled"
    )

    progress_start_step: int = Field(
        default=30,
        ge=0,
        description="Progress increment when a tracked operation starts"
    )

    progress_finish_step: int = Field(
        default=70,
        ge=0,
        description="Progress increment when a tracked operation completes"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stderr if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }


def load_config(**overrides) -> Config:
    """Load configuration from environment, with explicit overrides on top."""
    return Config(**{k: v for k, v in overrides.items() if v is not None})
