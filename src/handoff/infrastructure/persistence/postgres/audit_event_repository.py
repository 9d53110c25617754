"""PostgreSQL audit event repository implementation (insert and read only)."""

from uuid import UUID

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from handoff.domain.entities import AuditEvent
from handoff.domain.entities.audit_event import payload_from_metadata, payload_to_metadata
from handoff.domain.value_objects import ActorKind


class PostgresAuditEventRepository:
    """Audit event repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def append(self, event: AuditEvent) -> AuditEvent:
        await self._conn.execute(
            "INSERT INTO audit_event "
            "(id, delivery_id, tenant_id, event_type, actor, metadata, created_at) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s)",
            (
                event.id,
                event.delivery_id,
                event.tenant_id,
                event.event_type,
                event.actor.value,
                Jsonb(payload_to_metadata(event.payload)),
                event.created_at,
            ),
        )
        return event

    async def list_by_delivery(self, delivery_id: UUID) -> list[AuditEvent]:
        cur = await self._conn.execute(
            "SELECT id, delivery_id, tenant_id, event_type, actor, metadata, created_at "
            "FROM audit_event WHERE delivery_id = %s ORDER BY created_at, id",
            (delivery_id,),
        )
        rows = await cur.fetchall()
        return [
            AuditEvent(
                id=r[0],
                delivery_id=r[1],
                tenant_id=r[2],
                actor=ActorKind(r[4]),
                payload=payload_from_metadata(r[3], r[5] or {}),
                created_at=r[6],
            )
            for r in rows
        ]
