"""Enumerations."""

from identity_verifier.enums.endpoint import Endpoint
from identity_verifier.enums.risk_tier import RiskTier

__all__ = ["Endpoint", "RiskTier"]
