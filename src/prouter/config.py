"""Centralized configuration for prouter using Pydantic Settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``PROUTER_*`` environment variables.

    Values are validated once at startup. Command line flags are applied on top
    by passing them as keyword arguments (see ``prouter.app``).
    """

    model_config = SettingsConfigDict(
        env_prefix="PROUTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Content
    serve_path: Path = Field(description="Directory holding one sub-directory per tenant")

    # Server settings
    address: str = Field(default="", description="Address to bind to (empty binds all interfaces)")
    port: int = Field(default=8080, ge=1, le=65535, description="Port to bind to")
    uvicorn_limit_concurrency: int | None = Field(
        default=None, ge=1, description="Maximum concurrent connections before uvicorn answers 503"
    )

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    json_logs: bool = Field(default=False, description="Emit structured JSON log lines")
    access_log: bool = Field(default=False, description="Keep uvicorn access log at the root level")

    # Observability
    service_name: str = Field(default="prouter", description="OpenTelemetry service name")
    otlp_endpoint: str = Field(default="", description="OTLP/HTTP trace collector endpoint (empty disables export)")
    metrics_path: str = Field(default="", description="Path serving Prometheus metrics (empty disables it)")

    @field_validator("serve_path")
    @classmethod
    def _check_serve_path(cls, value: Path) -> Path:
        expanded = value.expanduser()
        if not expanded.exists():
            raise ValueError(f"Serve path does not exist: {expanded}")
        if not expanded.is_dir():
            raise ValueError(f"Serve path is not a directory: {expanded}")
        return expanded.resolve()

    @field_validator("metrics_path")
    @classmethod
    def _normalize_metrics_path(cls, value: str) -> str:
        value = value.strip().strip("/")
        return f"/{value}" if value else ""

    def bind_host(self) -> str:
        """Host handed to uvicorn; an empty address means all interfaces."""
        return self.address or "0.0.0.0"

    def listen_address(self) -> str:
        """Human readable ``host:port`` pair for log lines."""
        return f"{self.address}:{self.port}"
