"""Schema validation for verification payloads."""

from typing import Any

from pydantic import ValidationError

from identity_verifier.core.exceptions import SchemaViolation
from identity_verifier.models import VerificationResult
from identity_verifier.services.normalizer import normalize


def validate(payload: Any) -> VerificationResult:
    """
    Validate a payload against the verification result contract.

    No defaults are filled in for ``explanation``; run :func:`normalize`
    first when the payload comes from the backend.

    Args:
        payload (Any): Candidate verification result.

    Returns:
        VerificationResult: The validated, immutable result.

    Raises:
        SchemaViolation: If a required field is missing or has the wrong type.
    """
    try:
        return VerificationResult.model_validate(payload)
    except ValidationError as e:
        raise SchemaViolation(payload=payload, errors=e.errors()) from e


def parse_verification_result(raw: Any) -> VerificationResult:
    """
    Normalize then validate a backend payload.

    Args:
        raw (Any): Decoded JSON body.

    Returns:
        VerificationResult: The validated result.

    Raises:
        SchemaViolation: If the payload is invalid even after normalization.
    """
    return validate(normalize(raw))
