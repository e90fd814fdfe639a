"""Dependency injection providers."""

from functools import lru_cache

from identity_verifier.core.settings import get_settings
from identity_verifier.services.endpoints import get_endpoints
from identity_verifier.services.gateway import GatewayService


@lru_cache
def get_gateway_service() -> GatewayService:
    """
    Get cached gateway service singleton.

    Returns:
        GatewayService: The gateway service instance.

    Raises:
        ConfigError: If the backend URL is missing or malformed.
    """
    settings = get_settings()
    return GatewayService(settings)


def clear_dependency_caches() -> None:
    """Clear all dependency caches."""
    get_gateway_service.cache_clear()
    get_endpoints.cache_clear()
