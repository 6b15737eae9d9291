"""
Module: settings.py
Description: Application configuration using pydantic-settings.

Configures the delivery backend, provider endpoints, timeouts and the
background scheduler from environment variables with validation and
defaults. Supports .env files for local development.
"""

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BackendMode(str, Enum):
    """Delivery backend selected once at startup."""

    DIRECT = "DIRECT"
    BRIDGE = "BRIDGE"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application settings
    app_name: str = Field(
        default="channel-delivery",
        min_length=1,
        description="Application name, sent to providers as the application reference"
    )
    app_version: str = Field(default="0.1.0", description="Application version")
    log_level: str = Field(default="INFO", description="Logging level")
    stage: str = Field(default="dev", description="Deployment stage")

    # Backend selection
    backend_mode: BackendMode = Field(
        default=BackendMode.DIRECT,
        description="Delivery backend: DIRECT or BRIDGE"
    )
    base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the channel provider"
    )
    bridge_base_url: Optional[str] = Field(
        default=None,
        description="Base URL used for provisioning in BRIDGE mode (defaults to base_url)"
    )
    timeout_ms: int = Field(
        default=5000,
        ge=1,
        le=120000,
        description="Connect/read/write timeout in milliseconds for outbound calls"
    )

    # Secret store and bus settings
    secret_name: Optional[str] = Field(
        default=None,
        description="Name of the secret holding the message bus connection"
    )
    aws_region: str = Field(default="us-east-1", description="AWS region of the secret store")
    aws_endpoint: Optional[str] = Field(
        default=None,
        description="Secret store endpoint override (LocalStack and similar)"
    )
    bus_exchange: str = Field(
        default="domainEvents",
        min_length=1,
        description="Exchange that bridge events are published to"
    )
    event_source: str = Field(
        default="urn:channel-delivery:bridge",
        description="CloudEvent source attribute for bridge events"
    )

    # Scheduling settings
    max_jitter_ms: int = Field(
        default=10000,
        ge=0,
        description="Upper bound of the random pause between the first and second event"
    )
    worker_count: int = Field(
        default=8,
        ge=1,
        le=256,
        description="Number of background delivery workers"
    )
    default_delay_ms: int = Field(
        default=5000,
        ge=0,
        description="Delay used when a request does not provide one"
    )

    @field_validator('base_url', 'bridge_base_url')
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate provider URLs are HTTP/HTTPS."""
        if v is None:
            return v
        if not v.startswith(('http://', 'https://')):
            raise ValueError("URL must be a valid HTTP/HTTPS URL")
        return v.rstrip('/')

    @field_validator('backend_mode', mode='before')
    @classmethod
    def normalize_backend_mode(cls, v):
        """Accept the backend mode in any case."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @property
    def provisioning_url(self) -> str:
        """Base URL for credential provisioning in the active mode."""
        if self.backend_mode is BackendMode.BRIDGE and self.bridge_base_url:
            return self.bridge_base_url
        return self.base_url


# Global settings instance
settings = Settings()
