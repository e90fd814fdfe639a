"""Risk tier enum."""

from enum import StrEnum


class RiskTier(StrEnum):
    """Display tier derived from a verification result."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
