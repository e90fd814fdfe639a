"""Application settings using pydantic-settings."""

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class APIServerSettings(BaseModel):
    """Gateway HTTP server configuration."""

    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")
    cors_allow_origins: list[str] = Field(
        default_factory=list, description="CORS allowed origins (empty = no CORS)"
    )
    max_upload_size: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        description="Max document upload size in bytes (default 10MB)",
    )
    rate_limit: str = Field(default="10/minute", description="Rate limit for verification endpoint")


class ClientSettings(BaseModel):
    """Verification client configuration."""

    api_base_url: str = Field(
        default="",
        description="Backend base URL (empty = same-origin relative /api paths)",
    )
    timeout: float = Field(default=120.0, gt=0, description="Request timeout in seconds")

    @field_validator("api_base_url")
    @classmethod
    def strip_api_base_url(cls, v: str) -> str:
        """Trim surrounding whitespace from the base URL."""
        return v.strip()


class GatewaySettings(BaseModel):
    """Request gateway configuration."""

    backend_url: str | None = Field(
        default=None,
        description="Origin of the verification backend, e.g. http://backend:8080",
    )
    connect_timeout: float = Field(
        default=5.0, gt=0, description="Backend connect timeout in seconds"
    )
    timeout: float = Field(default=120.0, gt=0, description="Backend read/write timeout in seconds")

    @field_validator("backend_url")
    @classmethod
    def strip_backend_url(cls, v: str | None) -> str | None:
        """Treat a blank backend URL as not configured."""
        if v is None or not v.strip():
            return None
        return v.strip()


class LoggingSettings(BaseModel):
    """Logging configuration."""

    loggers: dict[str, str] = Field(default={}, description="Loggers and their levels")
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(
        default="[%(asctime)s] %(levelname)s [%(name)s] %(message)s",
        description="Log format",
    )
    date_format: str = Field(default="%Y-%m-%d %H:%M:%S", description="Log date format")
    rotate_logs: bool = Field(default=False, description="Rotate logs daily")
    log_file: str | None = Field(default=None, description="Log file to write to")


class AppSettings(BaseSettings):
    """Root application settings."""

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_prefix="IDV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_server: APIServerSettings = Field(default_factory=APIServerSettings)
    client: ClientSettings = Field(default_factory=ClientSettings)
    gateway: GatewaySettings = Field(default_factory=GatewaySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
