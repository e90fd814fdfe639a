"""Pytest configuration and fixtures."""

from collections.abc import Callable, Generator
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from identity_verifier.api.dependencies import clear_dependency_caches, get_gateway_service
from identity_verifier.api.server import app, limiter
from identity_verifier.core.settings import AppSettings, reload_settings
from identity_verifier.core.settings.app_settings import (
    APIServerSettings,
    ClientSettings,
    GatewaySettings,
    LoggingSettings,
)
from identity_verifier.models import EndpointSet
from identity_verifier.services.endpoints import resolve_endpoints
from identity_verifier.services.gateway import GatewayService

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def mock_settings() -> AppSettings:
    """
    Create mock application settings for testing.

    Returns:
        AppSettings: Mock settings instance.
    """
    return AppSettings(
        api_server=APIServerSettings(
            host="127.0.0.1",
            port=8000,
            cors_allow_origins=["http://localhost:3000"],
            max_upload_size=1024,
            rate_limit="100/minute",
        ),
        client=ClientSettings(api_base_url="https://verifier.example.com:8080/"),
        gateway=GatewaySettings(backend_url="http://backend:8080"),
        logging=LoggingSettings(
            log_level="DEBUG",
            log_format="%(message)s",
        ),
    )


@pytest.fixture
def valid_payload() -> dict[str, Any]:
    """
    Create a well-formed verification payload.

    Returns:
        dict[str, Any]: Payload in wire format.
    """
    return {
        "riskScore": 42,
        "riskLevel": "medium",
        "extractedData": {
            "name": "JANE DOE",
            "idNumber": "X1234567",
            "dob": "1990-04-12",
        },
        "explanation": ["Photo quality acceptable", "MRZ checksum valid"],
    }


@pytest.fixture
def record_payload(valid_payload: dict[str, Any]) -> dict[str, Any]:
    """
    Create a stored verification record payload.

    Returns:
        dict[str, Any]: Record in wire format.
    """
    return {
        **valid_payload,
        "id": "abc123",
        "fileName": "passport.png",
        "createdAt": "2026-10-01T12:30:00Z",
        "riskLevel": "MEDIUM RISK",
    }


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset settings and dependency caches around each test."""
    reload_settings()
    clear_dependency_caches()
    yield
    clear_dependency_caches()


@pytest.fixture(autouse=True)
def reset_rate_limiter() -> None:
    """Reset rate limiter storage before each test."""
    limiter.reset()


@pytest.fixture
def backend_requests() -> list[httpx.Request]:
    """
    Collect requests that reached the mocked backend.

    Returns:
        list[httpx.Request]: Requests in arrival order.
    """
    return []


@pytest.fixture
def backend_handler(valid_payload: dict[str, Any]) -> Handler:
    """
    Default mocked backend: echoes a valid verification result.

    Returns:
        Handler: Request handler.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=valid_payload)

    return handler


@pytest.fixture
def test_client(
    mock_settings: AppSettings,
    backend_handler: Handler,
    backend_requests: list[httpx.Request],
) -> Generator[TestClient, None, None]:
    """
    Create a test client whose gateway forwards to a mocked backend.

    Yields:
        TestClient: FastAPI test client.
    """

    def recording_handler(request: httpx.Request) -> httpx.Response:
        backend_requests.append(request)
        return backend_handler(request)

    gateway = GatewayService(mock_settings, transport=httpx.MockTransport(recording_handler))
    app.dependency_overrides[get_gateway_service] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def absolute_endpoints(mock_settings: AppSettings) -> EndpointSet:
    """
    Endpoints resolved against the mock settings' absolute base URL.

    Returns:
        EndpointSet: Resolved endpoints.
    """
    return resolve_endpoints(mock_settings.client.api_base_url)
