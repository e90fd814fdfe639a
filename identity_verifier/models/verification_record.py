"""Historical verification models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from identity_verifier.models.verification_result import VerificationResult


class VerificationRecord(VerificationResult):
    """A stored verification as listed by the history endpoint."""

    id: str = Field(description="Record identifier")
    file_name: str = Field(default="", alias="fileName", description="Uploaded file name")
    created_at: datetime | None = Field(
        default=None, alias="createdAt", description="When the verification was stored"
    )


class VerificationStats(BaseModel):
    """Aggregate verification counts."""

    total_verifications: int = Field(default=0, alias="totalVerifications")
    low_risk_count: int = Field(default=0, alias="lowRiskCount")
    medium_risk_count: int = Field(default=0, alias="mediumRiskCount")
    high_risk_count: int = Field(default=0, alias="highRiskCount")
    average_risk_score: float = Field(default=0.0, alias="averageRiskScore")
    risk_distribution: dict[str, int] = Field(default_factory=dict, alias="riskDistribution")

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "totalVerifications": 12,
                "lowRiskCount": 7,
                "mediumRiskCount": 3,
                "highRiskCount": 2,
                "averageRiskScore": 38.5,
                "riskDistribution": {"low": 7, "medium": 3, "high": 2},
            }
        },
    )
