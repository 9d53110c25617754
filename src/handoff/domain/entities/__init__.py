"""Domain entities."""

from handoff.domain.entities.access_token import AccessToken
from handoff.domain.entities.audit_event import (
    AuditEvent,
    AuditPayload,
    DocumentDownloaded,
    Finalized,
    FinalizeFailed,
    OriginalAttached,
    SignatureAttached,
    TokenRevoked,
)
from handoff.domain.entities.delivery import Delivery

__all__ = [
    "AccessToken",
    "AuditEvent",
    "AuditPayload",
    "Delivery",
    "DocumentDownloaded",
    "Finalized",
    "FinalizeFailed",
    "OriginalAttached",
    "SignatureAttached",
    "TokenRevoked",
]
