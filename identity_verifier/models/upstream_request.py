"""Upstream request model."""

from pydantic import BaseModel, ConfigDict, Field


class UpstreamRequest(BaseModel):
    """A gateway request rewritten to target the backend."""

    method: str = Field(description="HTTP method, unchanged")
    url: str = Field(description="Backend URL with the original path and query")
    headers: list[tuple[str, str]] = Field(
        default_factory=list, description="Forwarded headers in original order"
    )
    body: bytes = Field(default=b"", description="Request body, unchanged")

    model_config = ConfigDict(frozen=True)
