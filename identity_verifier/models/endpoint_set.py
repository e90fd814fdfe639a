"""Endpoint set model."""

from pydantic import BaseModel, ConfigDict, Field

from identity_verifier.enums import Endpoint


class EndpointSet(BaseModel):
    """Resolved URL for every logical endpoint, all sharing one base."""

    base_url: str = Field(description="Configured base URL ('' = same-origin)")
    health: str = Field(description="Liveness probe URL")
    verify: str = Field(description="Document verification URL")
    verifications: str = Field(description="Verification history URL")
    stats: str = Field(description="Aggregate statistics URL")
    login: str = Field(description="Login URL")
    logout: str = Field(description="Logout URL")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def is_same_origin(self) -> bool:
        """
        Whether the endpoints are relative paths on the caller's origin.

        Returns:
            bool: True if no base URL is configured.
        """
        return self.base_url == ""

    def url_for(self, endpoint: Endpoint) -> str:
        """
        Get the resolved URL for a logical endpoint.

        Args:
            endpoint (Endpoint): Logical endpoint.

        Returns:
            str: The resolved URL.
        """
        return getattr(self, endpoint.name.lower())
