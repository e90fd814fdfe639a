"""Health response model."""

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Gateway health check response."""

    status: str = Field(description="Health status")
    version: str = Field(description="Application version")
    backend_url: str | None = Field(
        default=None, description="Backend origin requests are forwarded to"
    )

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "status": "healthy",
                "version": "1.0.0",
                "backend_url": "http://backend:8080",
            }
        },
    )
