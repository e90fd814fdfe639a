"""FastAPI application hosting the request gateway."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware

from identity_verifier import __version__
from identity_verifier.api.dependencies import get_gateway_service
from identity_verifier.core.exceptions import ConfigError
from identity_verifier.core.settings import get_settings
from identity_verifier.core.utils import setup_logging
from identity_verifier.models import HealthResponse
from identity_verifier.services.gateway import (
    GatewayService,
    error_response,
    resolve_backend_origin,
)

logger = logging.getLogger(__name__)

FORWARDED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]

# Rate limiter instance
limiter = Limiter(key_func=get_remote_address)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Add security headers to response."""
        response = await call_next(request)
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Only add HSTS if behind HTTPS proxy (check X-Forwarded-Proto)
        if request.headers.get("X-Forwarded-Proto") == "https":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Handle rate limit exceeded errors."""
    return error_response(429, "Rate limit exceeded. Please try again later.")


def config_error_handler(request: Request, exc: ConfigError) -> Response:
    """Handle a gateway that was started without a usable backend URL."""
    logger.error(f"Gateway misconfigured: {exc.message}")
    return error_response(500, "Gateway is not configured")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Args:
        app (FastAPI): The FastAPI application instance.

    Yields:
        None

    Raises:
        ConfigError: If the backend URL is missing or malformed.
    """
    settings = get_settings()

    setup_logging(settings=settings.logging)

    logger.info(f"Starting Identity Verifier gateway v{__version__}")

    # There is no default backend host
    backend_origin = resolve_backend_origin(settings.gateway.backend_url)
    logger.info(f"Forwarding /api/* to {backend_origin}")

    yield

    logger.info("Shutting down Identity Verifier gateway")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Identity Verifier Gateway",
        description="Forwards identity document verification calls to the backend",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ConfigError, config_error_handler)  # type: ignore[arg-type]

    app.add_middleware(SecurityHeadersMiddleware)

    # CORS middleware - only add if origins are specified
    if settings.api_server.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api_server.cors_allow_origins,
            allow_credentials=True,
            allow_methods=FORWARDED_METHODS,
            allow_headers=["*"],
        )

    return app


app = create_app()


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Gateway health check, answered locally.

    Returns:
        HealthResponse: Health status including version and backend origin.
    """
    settings = get_settings()
    return HealthResponse(
        status="healthy",
        version=__version__,
        backend_url=settings.gateway.backend_url,
    )


@app.post("/api/verify", include_in_schema=False)
@limiter.limit(lambda: get_settings().api_server.rate_limit)
async def proxy_verify(
    request: Request,
    gateway: Annotated[GatewayService, Depends(get_gateway_service)],
) -> Response:
    """
    Forward a document upload after size and rate checks.

    Args:
        request (Request): The inbound request (also used for rate limiting).
        gateway (GatewayService): Injected gateway service.

    Returns:
        Response: The backend response, or 413 if the upload is too large.
    """
    max_size = get_settings().api_server.max_upload_size
    too_large = f"Document exceeds maximum size of {max_size} bytes"

    content_length = request.headers.get("content-length", "")
    if content_length.isdigit() and int(content_length) > max_size:
        logger.warning(f"Rejected upload of {content_length} bytes (limit {max_size})")
        return error_response(413, too_large)

    # Chunked uploads declare no length, so stop reading once past the limit
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_size:
            logger.warning(f"Rejected streamed upload over {max_size} bytes")
            return error_response(413, too_large)

    return await gateway.forward(request, body=bytes(body))


@app.api_route("/api/{path:path}", methods=FORWARDED_METHODS, include_in_schema=False)
async def proxy_api(
    request: Request,
    gateway: Annotated[GatewayService, Depends(get_gateway_service)],
) -> Response:
    """
    Forward any other /api/* call unchanged.

    Args:
        request (Request): The inbound request.
        gateway (GatewayService): Injected gateway service.

    Returns:
        Response: The backend response.
    """
    return await gateway.forward(request)
