"""Delivery entity - the aggregate root of one physical handoff."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from handoff.domain.value_objects import DeliveryStatus


@dataclass
class Delivery:
    """Signature and original document lifecycle of one delivery.

    Artifact references are storage paths; each is set at most once and never
    cleared. ``finalizing_at`` is the persisted finalization lock: it is only
    non-null while a composition attempt is in flight.
    """

    id: UUID
    tenant_id: UUID
    status: DeliveryStatus
    business_name: str
    signer_name: str
    created_at: datetime
    doc_number: str | None = None
    recipient_email: str | None = None
    signature_ref: str | None = None
    original_doc_ref: str | None = None
    final_doc_ref: str | None = None
    signed_at: datetime | None = None
    finalizing_at: datetime | None = None
    original_hash: str | None = None
    finalized_at: datetime | None = None

    @property
    def is_finalized(self) -> bool:
        return self.status == DeliveryStatus.FINALIZED or self.final_doc_ref is not None

    @property
    def is_ready(self) -> bool:
        """Both artifacts have been received."""
        return self.signature_ref is not None and self.original_doc_ref is not None

    @property
    def download_name(self) -> str:
        """File name offered for the final document."""
        return f"{self.doc_number or self.id}.pdf"
