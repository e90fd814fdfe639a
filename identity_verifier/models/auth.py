"""Authentication models."""

from pydantic import BaseModel, ConfigDict, Field


class LoginResponse(BaseModel):
    """Token issued by a successful login."""

    token: str = Field(min_length=1, description="Bearer token for later requests")
    username: str = Field(description="Authenticated user")
    role: str | None = Field(default=None, description="Role granted to the user")
    expires_in: int | None = Field(
        default=None,
        alias="expiresIn",
        description="Token expiry as epoch milliseconds",
    )

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "token": "eyJhbGciOiJIUzI1NiJ9.payload.signature",
                "username": "admin",
                "role": "ADMIN",
                "expiresIn": 1792329600000,
            }
        },
    )


class TokenValidation(BaseModel):
    """Result of checking a bearer token with the backend."""

    valid: bool = Field(description="Whether the token is accepted")
    username: str | None = Field(default=None, description="Token owner when valid")
    role: str | None = Field(default=None, description="Token role when valid")

    model_config = ConfigDict(frozen=True, extra="ignore")
