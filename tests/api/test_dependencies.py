"""Tests for API dependencies."""

from unittest.mock import patch

import pytest

from identity_verifier.api.dependencies import clear_dependency_caches, get_gateway_service
from identity_verifier.core.exceptions import ConfigError
from identity_verifier.core.settings import get_settings
from identity_verifier.services.endpoints import get_endpoints
from identity_verifier.services.gateway import GatewayService


class TestGetGatewayService:
    """Tests for get_gateway_service function."""

    def test_returns_gateway_service(self) -> None:
        """Test that get_gateway_service returns a GatewayService."""
        settings = get_settings()
        with patch.object(settings.gateway, "backend_url", "http://backend:8080"):
            service = get_gateway_service()

        assert isinstance(service, GatewayService)
        assert service.backend_origin == "http://backend:8080"

    def test_is_cached(self) -> None:
        """Test that the gateway service is a singleton."""
        settings = get_settings()
        with patch.object(settings.gateway, "backend_url", "http://backend:8080"):
            assert get_gateway_service() is get_gateway_service()

    def test_unconfigured_raises(self) -> None:
        """Test that a missing backend URL raises ConfigError."""
        settings = get_settings()
        with patch.object(settings.gateway, "backend_url", None):
            with pytest.raises(ConfigError):
                get_gateway_service()


class TestClearDependencyCaches:
    """Tests for clear_dependency_caches function."""

    def test_clears_gateway_service_cache(self) -> None:
        """Test that a new instance is created after clearing."""
        settings = get_settings()
        with patch.object(settings.gateway, "backend_url", "http://backend:8080"):
            service1 = get_gateway_service()
            clear_dependency_caches()
            service2 = get_gateway_service()

        assert service1 is not service2

    def test_clears_endpoint_cache(self) -> None:
        """Test that the endpoint set is recomputed after clearing."""
        endpoints1 = get_endpoints()
        clear_dependency_caches()
        assert get_endpoints() is not endpoints1

    def test_no_error_when_cache_empty(self) -> None:
        """Test that clearing empty caches does not raise."""
        clear_dependency_caches()
        clear_dependency_caches()
