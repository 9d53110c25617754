"""Document composition DTOs."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class CertificationMetadata:
    """Facts printed on the certification page."""

    business_name: str
    signer_name: str
    delivery_id: UUID
    signed_at: datetime
    doc_number: str | None = None


@dataclass(frozen=True)
class ComposedDocument:
    """Final document bytes and the hash of the original they certify."""

    final_bytes: bytes
    original_hash: str
