"""
Shared configuration management for the Admission Layer.
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="ADMISSION_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Rate limiting
    rate_limit: int = Field(default=2, description="Requests admitted per window")
    rate_limit_window_ms: int = Field(default=60_000, description="Fixed window length in milliseconds")
    rate_limit_scope: str = Field(default="global", description="'global' or 'identity'")

    # Guard chain
    guard_order: List[str] = Field(default_factory=lambda: ["rate_limit", "credentials", "role"])
    privileged_identities: List[str] = Field(default_factory=lambda: ["admin@example.com"])

    # Identity directory seed (YAML mapping of identity -> credential)
    directory_file: Optional[str] = Field(default=None)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
