"""Error response model."""

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Error body shared by the backend and the gateway."""

    message: str = Field(description="Human-readable error message")
    field: str | None = Field(default=None, description="Offending request field, if any")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "Invalid file type",
                "field": "file",
            }
        },
    )
