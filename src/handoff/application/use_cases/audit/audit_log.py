"""Append-only audit log."""

from collections.abc import Callable
from datetime import UTC, datetime
from uuid import uuid4

from handoff.domain.entities import AuditEvent, AuditPayload, Delivery
from handoff.domain.value_objects import ActorKind


class AuditLog:
    """Builds and appends audit events. There is no update or delete."""

    def __init__(
        self,
        unit_of_work_factory: type,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock or (lambda: datetime.now(UTC))

    def record(
        self,
        delivery: Delivery,
        payload: AuditPayload,
        actor: ActorKind = ActorKind.SYSTEM,
    ) -> AuditEvent:
        """Build an event for delivery without persisting it.

        Use this to append inside a caller's own unit of work.
        """
        return AuditEvent(
            id=uuid4(),
            delivery_id=delivery.id,
            tenant_id=delivery.tenant_id,
            actor=actor,
            payload=payload,
            created_at=self._clock(),
        )

    async def append(self, event: AuditEvent) -> AuditEvent:
        """Persist one event in its own transaction."""
        async with self._uow_factory() as uow:
            return await uow.audit_events.append(event)
