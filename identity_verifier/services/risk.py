"""Risk tier classification used for display routing."""

from identity_verifier.enums import RiskTier
from identity_verifier.models import VerificationResult

HIGH_RISK_SCORE = 75
LOW_RISK_SCORE = 30


def normalize_risk_label(risk_level: str) -> str:
    """
    Reduce a risk label to its tier word.

    Args:
        risk_level (str): Label such as "High" or "HIGH RISK".

    Returns:
        str: Lowercased label without a trailing "risk" word.
    """
    label = risk_level.strip().lower()
    if label.endswith(" risk"):
        label = label[: -len(" risk")].rstrip()
    return label


def classify_risk(risk_score: int, risk_level: str) -> RiskTier:
    """
    Classify a score and label into a risk tier.

    HIGH is checked first, so the more alarming of the two signals wins
    (score 80 labelled "low" is HIGH, score 10 labelled "high" is HIGH).
    LOW then takes the calmer signal (score 20 labelled "medium" is LOW).
    Anything else is MEDIUM.

    Args:
        risk_score (int): Score from 0 to 100.
        risk_level (str): Backend risk label, compared case-insensitively.

    Returns:
        RiskTier: The derived tier.
    """
    label = normalize_risk_label(risk_level)
    if risk_score >= HIGH_RISK_SCORE or label == RiskTier.HIGH:
        return RiskTier.HIGH
    if risk_score <= LOW_RISK_SCORE or label == RiskTier.LOW:
        return RiskTier.LOW
    return RiskTier.MEDIUM


def classify_result(result: VerificationResult) -> RiskTier:
    """
    Classify a validated verification result.

    Args:
        result (VerificationResult): Validated result.

    Returns:
        RiskTier: The derived tier.
    """
    return classify_risk(risk_score=result.risk_score, risk_level=result.risk_level)
