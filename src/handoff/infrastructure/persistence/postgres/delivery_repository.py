"""PostgreSQL delivery repository implementation."""

from datetime import datetime
from uuid import UUID

from psycopg import AsyncConnection

from handoff.domain.entities import Delivery
from handoff.domain.value_objects import DeliveryStatus

_COLUMNS = (
    "id, tenant_id, status, business_name, signer_name, created_at, doc_number, "
    "recipient_email, signature_ref, original_doc_ref, final_doc_ref, signed_at, "
    "finalizing_at, original_hash, finalized_at"
)

_OPEN_STATUSES = (
    DeliveryStatus.CREATED.value,
    DeliveryStatus.SIGNED.value,
    DeliveryStatus.DOC_UPLOADED.value,
)


def _row_to_delivery(r: tuple) -> Delivery:
    return Delivery(
        id=r[0],
        tenant_id=r[1],
        status=DeliveryStatus(r[2]),
        business_name=r[3],
        signer_name=r[4],
        created_at=r[5],
        doc_number=r[6],
        recipient_email=r[7],
        signature_ref=r[8],
        original_doc_ref=r[9],
        final_doc_ref=r[10],
        signed_at=r[11],
        finalizing_at=r[12],
        original_hash=r[13],
        finalized_at=r[14],
    )


class PostgresDeliveryRepository:
    """Delivery repository implementation.

    State changes are single conditional UPDATE ... RETURNING statements;
    rowcount tells whether the change applied.
    """

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, delivery_id: UUID) -> Delivery | None:
        """Get delivery by id."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM delivery WHERE id = %s",
            (delivery_id,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return _row_to_delivery(r)

    async def create(self, delivery: Delivery) -> Delivery:
        """Create delivery."""
        await self._conn.execute(
            f"INSERT INTO delivery ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                delivery.id,
                delivery.tenant_id,
                delivery.status.value,
                delivery.business_name,
                delivery.signer_name,
                delivery.created_at,
                delivery.doc_number,
                delivery.recipient_email,
                delivery.signature_ref,
                delivery.original_doc_ref,
                delivery.final_doc_ref,
                delivery.signed_at,
                delivery.finalizing_at,
                delivery.original_hash,
                delivery.finalized_at,
            ),
        )
        return delivery

    async def attach_signature(
        self, delivery_id: UUID, ref: str, signed_at: datetime
    ) -> bool:
        """Set signature_ref once, only while the delivery accepts artifacts."""
        cur = await self._conn.execute(
            "UPDATE delivery SET signature_ref = %s, signed_at = %s, status = %s "
            "WHERE id = %s AND signature_ref IS NULL AND status = ANY(%s) RETURNING id",
            (ref, signed_at, DeliveryStatus.SIGNED.value, delivery_id, list(_OPEN_STATUSES)),
        )
        return await cur.fetchone() is not None

    async def attach_original(self, delivery_id: UUID, ref: str) -> bool:
        """Set original_doc_ref once, only while the delivery accepts artifacts."""
        cur = await self._conn.execute(
            "UPDATE delivery SET original_doc_ref = %s, status = %s "
            "WHERE id = %s AND original_doc_ref IS NULL AND status = ANY(%s) RETURNING id",
            (ref, DeliveryStatus.DOC_UPLOADED.value, delivery_id, list(_OPEN_STATUSES)),
        )
        return await cur.fetchone() is not None

    async def acquire_finalize_lock(
        self,
        delivery_id: UUID,
        stamp: datetime,
        stale_before: datetime | None = None,
    ) -> bool:
        """Compare-and-set finalizing_at from NULL (or a stale stamp) to stamp."""
        if stale_before is None:
            lock_free = "finalizing_at IS NULL"
            params: tuple = (stamp, delivery_id)
        else:
            lock_free = "(finalizing_at IS NULL OR finalizing_at < %s)"
            params = (stamp, delivery_id, stale_before)
        cur = await self._conn.execute(
            "UPDATE delivery SET finalizing_at = %s "
            f"WHERE id = %s AND {lock_free} AND final_doc_ref IS NULL RETURNING id",
            params,
        )
        return await cur.fetchone() is not None

    async def mark_finalized(
        self,
        delivery_id: UUID,
        stamp: datetime,
        final_doc_ref: str,
        original_hash: str,
        finalized_at: datetime,
    ) -> bool:
        """Transition to FINALIZED; requires the lock to still hold stamp."""
        cur = await self._conn.execute(
            "UPDATE delivery SET status = %s, final_doc_ref = %s, original_hash = %s, "
            "finalized_at = %s, finalizing_at = NULL "
            "WHERE id = %s AND finalizing_at = %s AND final_doc_ref IS NULL RETURNING id",
            (
                DeliveryStatus.FINALIZED.value,
                final_doc_ref,
                original_hash,
                finalized_at,
                delivery_id,
                stamp,
            ),
        )
        return await cur.fetchone() is not None

    async def release_finalize_lock(self, delivery_id: UUID, stamp: datetime) -> bool:
        """Clear finalizing_at if this attempt still owns it."""
        cur = await self._conn.execute(
            "UPDATE delivery SET finalizing_at = NULL "
            "WHERE id = %s AND finalizing_at = %s RETURNING id",
            (delivery_id, stamp),
        )
        return await cur.fetchone() is not None
