"""Outcome of access token validation."""

from enum import StrEnum


class TokenStatus(StrEnum):
    """Caller-visible token validation codes."""

    OK = "OK"
    NOT_FOUND = "NOT_FOUND"
    REVOKED = "REVOKED"
    EXPIRED = "EXPIRED"
