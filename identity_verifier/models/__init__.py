"""Data models."""

from identity_verifier.models.auth import LoginResponse, TokenValidation
from identity_verifier.models.endpoint_set import EndpointSet
from identity_verifier.models.error_response import ErrorResponse
from identity_verifier.models.health_response import HealthResponse
from identity_verifier.models.upstream_request import UpstreamRequest
from identity_verifier.models.verification_record import VerificationRecord, VerificationStats
from identity_verifier.models.verification_result import ExtractedData, VerificationResult

__all__ = [
    "EndpointSet",
    "ErrorResponse",
    "ExtractedData",
    "HealthResponse",
    "LoginResponse",
    "TokenValidation",
    "UpstreamRequest",
    "VerificationRecord",
    "VerificationResult",
    "VerificationStats",
]
