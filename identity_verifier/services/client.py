"""Verification client - submits documents and reads results over HTTP."""

import logging
from typing import IO, Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from identity_verifier.core.exceptions import (
    ConfigError,
    HttpError,
    SchemaViolation,
    TransportError,
)
from identity_verifier.core.settings import AppSettings
from identity_verifier.models import (
    EndpointSet,
    LoginResponse,
    TokenValidation,
    VerificationRecord,
    VerificationResult,
    VerificationStats,
)
from identity_verifier.services.endpoints import (
    build_url,
    normalize_base_url,
    resolve_endpoints,
)
from identity_verifier.services.normalizer import normalize
from identity_verifier.services.validation import parse_verification_result

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

UPLOAD_FIELD_NAME = "file"
VERIFICATION_PATH = "/api/verifications/:id"
TOKEN_VALIDATION_PATH = "/api/auth/validate"


def extract_error_message(response: httpx.Response) -> str:
    """
    Extract a human-readable message from an error response.

    Uses a non-empty ``message`` string if present, else the first entry of
    a non-empty ``explanation`` list, else the HTTP status text. A body that
    cannot be parsed falls back to the status text.

    Args:
        response (httpx.Response): Non-success response.

    Returns:
        str: A non-empty error message.
    """
    status_text = response.reason_phrase or f"Request failed with status {response.status_code}"

    try:
        body = response.json()
    except ValueError:
        return status_text

    if not isinstance(body, dict):
        return status_text

    message = body.get("message")
    if isinstance(message, str) and message.strip():
        return message

    explanation = body.get("explanation")
    if isinstance(explanation, list) and explanation:
        first = explanation[0]
        if isinstance(first, str) and first.strip():
            return first

    return status_text


class VerificationClient:
    """Client for the verification API."""

    def __init__(
        self,
        endpoints: EndpointSet,
        origin: str | None = None,
        timeout: float = 120.0,
        auth_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the verification client.

        Args:
            endpoints (EndpointSet): Resolved endpoint URLs.
            origin (str | None): Scheme and host that same-origin paths are sent to.
            timeout (float): Transport timeout in seconds.
            auth_token (str | None): Bearer token sent with every request.
            transport (httpx.AsyncBaseTransport | None): Custom transport.

        Raises:
            ConfigError: If the origin is malformed, or the endpoints are
                same-origin and no origin is given.
        """
        origin = normalize_base_url(origin)
        if endpoints.is_same_origin and not origin:
            raise ConfigError("Same-origin endpoints require an origin to send requests to")

        self.endpoints = endpoints
        self.origin = origin
        self.timeout = timeout
        self.auth_token = auth_token
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        origin: str | None = None,
        auth_token: str | None = None,
    ) -> "VerificationClient":
        """
        Create a client from application settings.

        Args:
            settings (AppSettings): Application settings instance.
            origin (str | None): Origin for same-origin endpoints.
            auth_token (str | None): Bearer token sent with every request.

        Returns:
            VerificationClient: The configured client.

        Raises:
            ConfigError: If the configured base URL is malformed.
        """
        return cls(
            endpoints=resolve_endpoints(settings.client.api_base_url),
            origin=origin,
            timeout=settings.client.timeout,
            auth_token=auth_token,
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """
        Send one request and raise for transport or HTTP failures.

        Args:
            method (str): HTTP method.
            url (str): Absolute URL or same-origin path.
            **kwargs (Any): Extra arguments for ``httpx.AsyncClient.request``.

        Returns:
            httpx.Response: A successful response.

        Raises:
            TransportError: If no response was received.
            HttpError: If the response status is not 2xx.
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.origin,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, url, headers=self._headers(), **kwargs)
        except httpx.RequestError as e:
            message = str(e) or type(e).__name__
            logger.warning(f"{method} {url} failed without a response: {message}")
            raise TransportError(message) from e

        if not response.is_success:
            message = extract_error_message(response)
            logger.warning(f"{method} {url} returned {response.status_code}: {message}")
            raise HttpError(message, status_code=response.status_code)

        return response

    @staticmethod
    def _json(response: httpx.Response, message: str | None = None) -> Any:
        """Decode a success body; an unparsable body breaks the contract."""
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Unparsable JSON from {response.request.url}: {response.text!r}")
            if message is None:
                raise SchemaViolation(payload=response.text) from e
            raise SchemaViolation(message, payload=response.text) from e

    async def verify(
        self,
        file: bytes | IO[bytes],
        filename: str = "document",
        content_type: str | None = None,
    ) -> VerificationResult:
        """
        Submit a document image for verification.

        The request is sent once; failed submissions are never retried.

        Args:
            file (bytes | IO[bytes]): Document content.
            filename (str): File name reported in the upload.
            content_type (str | None): MIME type of the document.

        Returns:
            VerificationResult: The validated risk assessment.

        Raises:
            TransportError: If the service could not be reached.
            HttpError: If the service rejected the request.
            SchemaViolation: If the response breaks the result contract.
        """
        upload = (filename, file, content_type) if content_type else (filename, file)
        logger.info(f"Submitting {filename} for verification")

        response = await self._request(
            "POST",
            self.endpoints.verify,
            files={UPLOAD_FIELD_NAME: upload},
        )
        raw = self._json(response)

        try:
            result = parse_verification_result(raw)
        except SchemaViolation as e:
            logger.error(f"Verification result failed validation: {e.errors}; payload={raw!r}")
            raise

        logger.info(f"Verification of {filename} completed: {result.risk_level} ({result.risk_score})")
        return result

    async def health(self) -> Any:
        """
        Query the backend liveness probe.

        Returns:
            Any: The decoded health body.
        """
        response = await self._request("GET", self.endpoints.health)
        return self._json(response, message="Health check returned an invalid body")

    async def list_verifications(
        self, limit: int = 50, offset: int = 0
    ) -> list[VerificationRecord]:
        """
        List recent verifications.

        Args:
            limit (int): Maximum number of records.
            offset (int): Number of records to skip.

        Returns:
            list[VerificationRecord]: Validated records, newest first as served.

        Raises:
            SchemaViolation: If the body is not a list of valid records.
        """
        response = await self._request(
            "GET", self.endpoints.verifications, params={"limit": limit, "offset": offset}
        )
        raw = self._json(response, message="Verification history returned an invalid body")

        if not isinstance(raw, list):
            logger.error(f"Verification history is not a list: {raw!r}")
            raise SchemaViolation("Verification history returned an invalid body", payload=raw)

        return [self._parse_record(item) for item in raw]

    async def get_verification(self, record_id: str) -> VerificationRecord:
        """
        Fetch one stored verification.

        Args:
            record_id (str): Record identifier.

        Returns:
            VerificationRecord: The validated record.
        """
        url = build_url(
            VERIFICATION_PATH,
            params={"id": record_id},
            base_url=self.endpoints.base_url,
        )
        response = await self._request("GET", url)
        return self._parse_record(
            self._json(response, message="Verification record returned an invalid body")
        )

    async def get_stats(self) -> VerificationStats:
        """
        Fetch aggregate verification statistics.

        Returns:
            VerificationStats: The validated statistics.
        """
        response = await self._request("GET", self.endpoints.stats)
        message = "Statistics returned an invalid body"
        return self._parse_model(VerificationStats, self._json(response, message), message)

    async def login(self, username: str, password: str) -> LoginResponse:
        """
        Log in and keep the issued token for later requests.

        Args:
            username (str): Account name.
            password (str): Account password.

        Returns:
            LoginResponse: The issued token and its owner.

        Raises:
            HttpError: If the credentials are rejected.
            SchemaViolation: If the response carries no usable token.
        """
        response = await self._request(
            "POST",
            self.endpoints.login,
            json={"username": username, "password": password},
        )
        message = "Login returned an invalid body"
        login = self._parse_model(LoginResponse, self._json(response, message), message)

        self.auth_token = login.token
        logger.info(f"Logged in as {login.username}")
        return login

    async def validate_token(self) -> TokenValidation:
        """
        Ask the backend whether the held token is still valid.

        Returns:
            TokenValidation: Validity with the token owner and role.
        """
        if not self.auth_token:
            return TokenValidation(valid=False)

        url = build_url(TOKEN_VALIDATION_PATH, base_url=self.endpoints.base_url)
        response = await self._request("GET", url)
        message = "Token validation returned an invalid body"
        return self._parse_model(TokenValidation, self._json(response, message), message)

    async def logout(self) -> None:
        """
        End the session and forget the held token.

        The token is dropped even if the backend call fails. A backend
        without a logout route (404) only needs the local token discarded.

        Raises:
            TransportError: If the service could not be reached.
            HttpError: If the service rejected the logout.
        """
        if not self.auth_token:
            return

        try:
            await self._request("POST", self.endpoints.logout)
        except HttpError as e:
            if e.status_code != 404:
                raise
            logger.debug("Backend has no logout route, discarding token locally")
        finally:
            self.auth_token = None

    @staticmethod
    def _parse_model(model: type[ModelT], raw: Any, message: str) -> ModelT:
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            logger.error(f"{message}: {e.errors()}; payload={raw!r}")
            raise SchemaViolation(message, payload=raw, errors=e.errors()) from e

    @staticmethod
    def _parse_record(raw: Any) -> VerificationRecord:
        try:
            return VerificationRecord.model_validate(normalize(raw))
        except ValidationError as e:
            logger.error(f"Verification record failed validation: {e.errors()}; payload={raw!r}")
            raise SchemaViolation(
                "Verification record returned an invalid body", payload=raw, errors=e.errors()
            ) from e
