"""Audit event actors."""

from enum import StrEnum


class ActorKind(StrEnum):
    """Who caused an audited event."""

    EMPLOYEE = "employee"
    CLIENT = "client"
    SYSTEM = "system"
