"""Delivery DTOs."""

from dataclasses import dataclass
from uuid import UUID

from handoff.application.dto.finalize_result import FinalizeResult
from handoff.domain.entities import Delivery


@dataclass
class DeliveryCreateInput:
    """Input for creating a delivery."""

    tenant_id: UUID
    business_name: str
    signer_name: str
    doc_number: str | None = None
    recipient_email: str | None = None


@dataclass
class AttachResult:
    """Result of attaching a signature or original document."""

    delivery: Delivery
    already_attached: bool
    finalize: FinalizeResult | None = None
