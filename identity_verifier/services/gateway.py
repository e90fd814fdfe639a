"""Request gateway - forwards /api/* calls to the verification backend."""

import logging
from collections.abc import Iterable
from urllib.parse import quote, urlsplit

import httpx
from fastapi import Request
from fastapi.responses import JSONResponse, Response
from starlette.types import Scope

from identity_verifier.core.exceptions import ConfigError
from identity_verifier.core.settings import AppSettings
from identity_verifier.models import ErrorResponse, UpstreamRequest
from identity_verifier.services.endpoints import normalize_base_url

logger = logging.getLogger(__name__)

API_PREFIX = "/api"

# Connection-scoped headers that must not be forwarded by a proxy (RFC 9110 7.6.1)
HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "proxy-connection",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
    }
)

# Recomputed for the upstream request
REQUEST_EXCLUDED_HEADERS = HOP_BY_HOP_HEADERS | {"host", "content-length"}

# The relayed body is already decoded
RESPONSE_EXCLUDED_HEADERS = HOP_BY_HOP_HEADERS | {"content-length", "content-encoding"}


def resolve_backend_origin(backend_url: str | None) -> str:
    """
    Validate the configured backend URL as a bare origin.

    Args:
        backend_url (str | None): Configured backend URL.

    Returns:
        str: The origin, e.g. "http://backend:8080".

    Raises:
        ConfigError: If the URL is missing, malformed, or has a path.
    """
    origin = normalize_base_url(backend_url)
    if not origin:
        raise ConfigError(
            "Gateway backend URL is not configured (set IDV_GATEWAY__BACKEND_URL)"
        )
    if urlsplit(origin).path:
        raise ConfigError(f"Gateway backend URL must be an origin without a path: {origin!r}")
    return origin


def is_gateway_path(path: str) -> bool:
    """
    Check whether a path belongs to the forwarded API namespace.

    Args:
        path (str): Request path.

    Returns:
        bool: True for "/api" and anything under "/api/".
    """
    return path == API_PREFIX or path.startswith(f"{API_PREFIX}/")


def raw_target(scope: Scope) -> tuple[str, str]:
    """
    Get the request path and query exactly as the client sent them.

    Percent-escapes such as "%2F" and "%3F" stay encoded, unlike the
    decoded ``scope["path"]`` used for routing.

    Args:
        scope (Scope): ASGI connection scope.

    Returns:
        tuple[str, str]: Raw path and raw query string (without "?").
    """
    raw_path = scope.get("raw_path")
    if raw_path:
        # Some servers include the query in raw_path
        path = raw_path.decode("latin-1").split("?", 1)[0]
    else:
        path = quote(scope["path"])
    query = scope.get("query_string", b"").decode("latin-1")
    return path, query


def filter_headers(
    headers: Iterable[tuple[str, str]], excluded: frozenset[str]
) -> list[tuple[str, str]]:
    """
    Drop excluded headers, keeping order and repeated names.

    Args:
        headers (Iterable[tuple[str, str]]): Header name/value pairs.
        excluded (frozenset[str]): Lowercase header names to drop.

    Returns:
        list[tuple[str, str]]: The remaining headers.
    """
    return [(name, value) for name, value in headers if name.lower() not in excluded]


def build_upstream_request(
    backend_origin: str,
    method: str,
    path: str,
    query: str = "",
    headers: Iterable[tuple[str, str]] = (),
    body: bytes = b"",
) -> UpstreamRequest:
    """
    Rewrite an inbound request to target the backend.

    Only scheme, host and port change. Path (including the /api prefix),
    query, method and body are kept; Host and Content-Length are left for
    the transport to set.

    Args:
        backend_origin (str): Validated backend origin.
        method (str): Inbound HTTP method.
        path (str): Inbound path.
        query (str): Inbound query string without "?".
        headers (Iterable[tuple[str, str]]): Inbound headers.
        body (bytes): Inbound body.

    Returns:
        UpstreamRequest: The rewritten request.

    Raises:
        ValueError: If the path is outside the /api namespace.
    """
    if not is_gateway_path(path):
        raise ValueError(f"Path is not forwarded by the gateway: {path!r}")

    url = f"{backend_origin}{path}"
    if query:
        url = f"{url}?{query}"

    return UpstreamRequest(
        method=method.upper(),
        url=url,
        headers=filter_headers(headers, REQUEST_EXCLUDED_HEADERS),
        body=body,
    )


def error_response(status_code: int, message: str) -> JSONResponse:
    """
    Build a JSON error response in the API's error shape.

    Args:
        status_code (int): HTTP status code.
        message (str): Human-readable message.

    Returns:
        JSONResponse: The error response.
    """
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(exclude_none=True),
    )


class GatewayService:
    """Stateless forwarder from the client-facing origin to the backend."""

    def __init__(
        self,
        settings: AppSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the gateway service.

        Args:
            settings (AppSettings): Application settings instance.
            transport (httpx.AsyncBaseTransport | None): Custom transport.

        Raises:
            ConfigError: If the backend URL is missing or malformed.
        """
        self.settings = settings
        self.backend_origin = resolve_backend_origin(settings.gateway.backend_url)
        self.timeout = httpx.Timeout(
            settings.gateway.timeout,
            connect=settings.gateway.connect_timeout,
        )
        self._transport = transport

    async def send(self, upstream: UpstreamRequest) -> Response:
        """
        Send a rewritten request to the backend and relay its response.

        Each call maps to exactly one backend request; nothing is retried.

        Args:
            upstream (UpstreamRequest): Rewritten request.

        Returns:
            Response: The backend response, or a 502/504 error response.
        """
        logger.debug(f"Forwarding {upstream.method} {upstream.url}")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                follow_redirects=False,
            ) as client:
                backend_response = await client.request(
                    upstream.method,
                    upstream.url,
                    headers=upstream.headers,
                    content=upstream.body,
                )
        except httpx.TimeoutException as e:
            logger.error(f"Backend timed out for {upstream.method} {upstream.url}: {e}")
            return error_response(504, "Verification backend timed out")
        except httpx.RequestError as e:
            logger.error(f"Backend unreachable for {upstream.method} {upstream.url}: {e}")
            return error_response(502, "Verification backend is unreachable")

        response = Response(
            content=backend_response.content,
            status_code=backend_response.status_code,
        )
        for name, value in filter_headers(
            backend_response.headers.multi_items(), RESPONSE_EXCLUDED_HEADERS
        ):
            response.headers.append(name, value)
        if upstream.method == "HEAD" and "content-length" in backend_response.headers:
            # No body is relayed for HEAD, so keep the backend's declared length
            response.headers["content-length"] = backend_response.headers["content-length"]
        return response

    async def forward(self, request: Request, body: bytes | None = None) -> Response:
        """
        Forward an inbound request to the backend.

        Args:
            request (Request): Inbound request.
            body (bytes | None): Body already read from the request, if any.

        Returns:
            Response: The relayed backend response.
        """
        path, query = raw_target(request.scope)
        if body is None:
            body = await request.body()

        upstream = build_upstream_request(
            backend_origin=self.backend_origin,
            method=request.method,
            path=path,
            query=query,
            headers=request.headers.items(),
            body=body,
        )
        return await self.send(upstream)
