"""Verification result models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExtractedData(BaseModel):
    """Identity fields read from the document; empty string means unreadable."""

    name: str = Field(default="", description="Full name on the document")
    id_number: str = Field(default="", alias="idNumber", description="Document number")
    dob: str = Field(default="", description="Date of birth as printed")

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "name": "JANE DOE",
                "idNumber": "X1234567",
                "dob": "1990-04-12",
            }
        },
    )


class VerificationResult(BaseModel):
    """Risk assessment returned for one submitted document."""

    risk_score: int = Field(alias="riskScore", ge=0, le=100, description="Risk score (0-100)")
    risk_level: str = Field(alias="riskLevel", description="Risk label, e.g. 'low' or 'HIGH RISK'")
    extracted_data: ExtractedData = Field(
        alias="extractedData", description="Identity fields read from the document"
    )
    explanation: list[str] = Field(description="Analysis findings in display order")

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "riskScore": 82,
                "riskLevel": "high",
                "extractedData": {
                    "name": "JANE DOE",
                    "idNumber": "X1234567",
                    "dob": "1990-04-12",
                },
                "explanation": [
                    "Face match confidence below threshold",
                    "Document number failed checksum",
                ],
            }
        },
    )

    @field_validator("risk_score", mode="before")
    @classmethod
    def reject_boolean_score(cls, v: Any) -> Any:
        """Reject booleans, which would otherwise pass as 0 or 1."""
        if isinstance(v, bool):
            raise ValueError("riskScore must be a number")
        return v
