"""Access token kinds."""

from enum import StrEnum


class TokenType(StrEnum):
    """Short-lived pickup token (QR) or long-lived emailed link."""

    PICKUP = "pickup"
    EMAIL = "email"
