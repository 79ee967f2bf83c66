"""Configuration management using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BOUNCER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Admin credential
    admin_key_id: str | None = Field(
        default=None,
        description="Key id of the single admin credential trusted by the verifier",
    )
    admin_secret: str | None = Field(
        default=None,
        description="Shared secret of the admin credential",
    )

    # Signing scheme
    auth_scheme_tag: str = Field(
        default="MOSS",
        description="Scheme tag prefixing the Authorization header value",
    )
    custom_header_prefix: str = Field(
        default="x-amz-",
        description="Vendor prefix of headers folded into the canonical string",
    )

    # Auth
    auth_mode: Literal["none", "signed"] = Field(
        default="signed",
        description="Authentication mode for inbound requests",
    )
    auth_exempt_paths: tuple[str, ...] = Field(
        default=("/ping", "/ping/"),
        description="Paths exempt from signed request auth",
    )

    # Bucket bouncer connection
    bouncer_host: str = Field(
        default="127.0.0.1",
        description="Bucket bouncer hostname or IP",
    )
    bouncer_port: int = Field(
        default=8000,
        description="Bucket bouncer port",
    )
    bouncer_ssl: bool = Field(
        default=True,
        description="Use HTTPS when talking to the bucket bouncer",
    )
    http_timeout: float = Field(
        default=30.0,
        description="HTTP request timeout in seconds",
    )

    # Server
    server_host: str = Field(
        default="0.0.0.0",
        description="Host for the bouncer HTTP server",
    )
    server_port: int = Field(
        default=8000,
        description="Port for the bouncer HTTP server",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level name",
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (False for console output)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
