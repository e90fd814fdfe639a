"""Endpoint enum."""

from enum import StrEnum


class Endpoint(StrEnum):
    """Logical API endpoints and their fixed paths."""

    HEALTH = "/api/health"
    VERIFY = "/api/verify"
    VERIFICATIONS = "/api/verifications"
    STATS = "/api/stats"
    LOGIN = "/api/auth/login"
    LOGOUT = "/api/auth/logout"
