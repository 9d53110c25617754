"""Audit event repository port."""

from typing import Protocol
from uuid import UUID

from handoff.domain.entities import AuditEvent


class AuditEventRepository(Protocol):
    """Append-only audit trail. There is no update or delete."""

    async def append(self, event: AuditEvent) -> AuditEvent: ...

    async def list_by_delivery(self, delivery_id: UUID) -> list[AuditEvent]: ...
