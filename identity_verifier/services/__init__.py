"""Verification contract, client and gateway services."""

from identity_verifier.services.client import VerificationClient, extract_error_message
from identity_verifier.services.endpoints import build_url, get_endpoints, resolve_endpoints
from identity_verifier.services.gateway import GatewayService, build_upstream_request
from identity_verifier.services.normalizer import normalize
from identity_verifier.services.risk import classify_result, classify_risk
from identity_verifier.services.validation import parse_verification_result, validate

__all__ = [
    "GatewayService",
    "VerificationClient",
    "build_upstream_request",
    "build_url",
    "classify_result",
    "classify_risk",
    "extract_error_message",
    "get_endpoints",
    "normalize",
    "parse_verification_result",
    "resolve_endpoints",
    "validate",
]
