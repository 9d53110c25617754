"""Delivery repository port."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from handoff.domain.entities import Delivery


class DeliveryRepository(Protocol):
    """Port for delivery persistence.

    Every state change is a single conditional update that reports whether it
    applied; none of them is a read-then-write pair.
    """

    async def get_by_id(self, delivery_id: UUID) -> Delivery | None: ...

    async def create(self, delivery: Delivery) -> Delivery: ...

    async def attach_signature(
        self, delivery_id: UUID, ref: str, signed_at: datetime
    ) -> bool:
        """Set signature_ref, signed_at and status SIGNED if no signature is set yet."""
        ...

    async def attach_original(self, delivery_id: UUID, ref: str) -> bool:
        """Set original_doc_ref and status DOC_UPLOADED if no original is set yet."""
        ...

    async def acquire_finalize_lock(
        self,
        delivery_id: UUID,
        stamp: datetime,
        stale_before: datetime | None = None,
    ) -> bool:
        """Set finalizing_at = stamp only if the lock is free (or older than stale_before)."""
        ...

    async def mark_finalized(
        self,
        delivery_id: UUID,
        stamp: datetime,
        final_doc_ref: str,
        original_hash: str,
        finalized_at: datetime,
    ) -> bool:
        """Transition to FINALIZED if finalizing_at still equals stamp."""
        ...

    async def release_finalize_lock(self, delivery_id: UUID, stamp: datetime) -> bool:
        """Clear finalizing_at if it still equals stamp."""
        ...
