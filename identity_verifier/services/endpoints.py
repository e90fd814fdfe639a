"""Endpoint resolver - maps logical endpoints onto one configured base URL."""

import ipaddress
import re
from collections.abc import Mapping
from functools import lru_cache
from urllib.parse import urlsplit

import httpx

from identity_verifier.core.exceptions import ConfigError
from identity_verifier.core.settings import get_settings
from identity_verifier.enums import Endpoint
from identity_verifier.models import EndpointSet

PLACEHOLDER_PATTERN = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")

# Registered names, including underscores used by container hostnames
HOSTNAME_PATTERN = re.compile(r"[\w.-]+")

ALLOWED_SCHEMES = ("http", "https")


def is_valid_host(hostname: str) -> bool:
    """
    Check that a parsed hostname is a plain name or an IP literal.

    Args:
        hostname (str): Hostname as returned by ``urlsplit``.

    Returns:
        bool: False for names containing whitespace or other stray characters.
    """
    if ":" in hostname:
        try:
            ipaddress.IPv6Address(hostname)
        except ValueError:
            return False
        return True
    return HOSTNAME_PATTERN.fullmatch(hostname) is not None


def normalize_base_url(base_url: str | None) -> str:
    """
    Validate a configured base URL and strip trailing slashes.

    Args:
        base_url (str | None): Absolute http(s) URL, or empty/None for same-origin.

    Returns:
        str: The normalized base URL, or "" for same-origin.

    Raises:
        ConfigError: If the URL is not an absolute http(s) URL with a host.
    """
    if base_url is None:
        return ""

    value = base_url.strip()
    if not value:
        return ""

    try:
        parts = urlsplit(value)
        httpx.URL(value)
    except (ValueError, httpx.InvalidURL) as e:
        raise ConfigError(f"Base URL is malformed: {value!r}") from e

    if parts.scheme not in ALLOWED_SCHEMES:
        raise ConfigError(f"Base URL must use http or https: {value!r}")
    if not parts.hostname:
        raise ConfigError(f"Base URL has no host: {value!r}")
    if not is_valid_host(parts.hostname):
        raise ConfigError(f"Base URL has an invalid host: {value!r}")
    if parts.query or parts.fragment:
        raise ConfigError(f"Base URL must not contain a query or fragment: {value!r}")
    try:
        # Accessing the port validates it
        parts.port
    except ValueError as e:
        raise ConfigError(f"Base URL has an invalid port: {value!r}") from e

    return value.rstrip("/")


def resolve_endpoints(base_url: str | None) -> EndpointSet:
    """
    Build the endpoint set for a configured base URL.

    Args:
        base_url (str | None): Absolute base URL, or empty/None for same-origin.

    Returns:
        EndpointSet: Every logical endpoint resolved against the base.

    Raises:
        ConfigError: If the base URL is malformed.
    """
    base = normalize_base_url(base_url)
    urls = {endpoint.name.lower(): f"{base}{endpoint.value}" for endpoint in Endpoint}
    return EndpointSet(base_url=base, **urls)


def is_absolute_url(url: str) -> bool:
    """
    Check whether a URL carries its own http(s) scheme and host.

    Args:
        url (str): URL or path.

    Returns:
        bool: True for fully-qualified URLs.
    """
    parts = urlsplit(url)
    return parts.scheme in ALLOWED_SCHEMES and bool(parts.netloc)


def substitute_placeholders(path: str, params: Mapping[str, object] | None = None) -> str:
    """
    Replace ``:key`` placeholders with parameter values.

    Placeholders without a matching parameter are left verbatim.

    Args:
        path (str): Path containing placeholders, e.g. "/api/verifications/:id".
        params (Mapping[str, object] | None): Values to substitute.

    Returns:
        str: The path with known placeholders substituted.
    """
    if not params:
        return path

    def replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in params:
            return str(params[key])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(replace, path)


def build_url(
    endpoint_or_path: str,
    params: Mapping[str, object] | None = None,
    base_url: str | None = None,
) -> str:
    """
    Resolve a path against the base URL and substitute placeholders.

    Fully-qualified URLs are otherwise left as given; placeholders anywhere in
    them (path or query) are still substituted.

    Args:
        endpoint_or_path (str): Absolute URL or relative path.
        params (Mapping[str, object] | None): Placeholder values.
        base_url (str | None): Base URL to resolve against. Defaults to the
            configured client base URL.

    Returns:
        str: The resolved URL.

    Raises:
        ConfigError: If the base URL is malformed.
    """
    if is_absolute_url(endpoint_or_path):
        return substitute_placeholders(endpoint_or_path, params)

    if base_url is None:
        base = get_endpoints().base_url
    else:
        base = normalize_base_url(base_url)

    path = endpoint_or_path if endpoint_or_path.startswith("/") else f"/{endpoint_or_path}"
    return f"{base}{substitute_placeholders(path, params)}"


@lru_cache
def get_endpoints() -> EndpointSet:
    """
    Get the endpoint set for the configured client base URL.

    Returns:
        EndpointSet: The cached endpoint set.

    Raises:
        ConfigError: If the configured base URL is malformed.
    """
    return resolve_endpoints(get_settings().client.api_base_url)
