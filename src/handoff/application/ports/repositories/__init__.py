"""Repository ports."""

from handoff.application.ports.repositories.access_token_repository import (
    AccessTokenRepository,
)
from handoff.application.ports.repositories.audit_event_repository import (
    AuditEventRepository,
)
from handoff.application.ports.repositories.delivery_repository import DeliveryRepository

__all__ = [
    "AccessTokenRepository",
    "AuditEventRepository",
    "DeliveryRepository",
]
