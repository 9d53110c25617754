"""Audit event entity and its payload variants.

Each event type has exactly one payload shape. Payloads serialize to a flat
metadata mapping for storage and are rebuilt from it with
``payload_from_metadata``.
"""

from dataclasses import asdict, dataclass, fields
from datetime import datetime
from typing import Any, ClassVar
from uuid import UUID

from handoff.domain.value_objects import ActorKind


@dataclass(frozen=True)
class Finalized:
    event_type: ClassVar[str] = "finalized"

    original_hash: str
    final_size: int


@dataclass(frozen=True)
class FinalizeFailed:
    event_type: ClassVar[str] = "finalize_failed"

    error: str


@dataclass(frozen=True)
class SignatureAttached:
    event_type: ClassVar[str] = "signature_attached"

    size: int
    content_type: str


@dataclass(frozen=True)
class OriginalAttached:
    event_type: ClassVar[str] = "original_attached"

    size: int


@dataclass(frozen=True)
class DocumentDownloaded:
    event_type: ClassVar[str] = "document_downloaded"

    token_id: str


@dataclass(frozen=True)
class TokenRevoked:
    event_type: ClassVar[str] = "token_revoked"

    token_id: str


AuditPayload = (
    Finalized
    | FinalizeFailed
    | SignatureAttached
    | OriginalAttached
    | DocumentDownloaded
    | TokenRevoked
)

PAYLOAD_TYPES: dict[str, type] = {
    cls.event_type: cls
    for cls in (
        Finalized,
        FinalizeFailed,
        SignatureAttached,
        OriginalAttached,
        DocumentDownloaded,
        TokenRevoked,
    )
}


def payload_to_metadata(payload: AuditPayload) -> dict[str, Any]:
    """Flatten payload to a JSON-compatible mapping."""
    return asdict(payload)


def payload_from_metadata(event_type: str, metadata: dict[str, Any]) -> AuditPayload:
    """Rebuild a payload from its stored event type and metadata."""
    cls = PAYLOAD_TYPES.get(event_type)
    if cls is None:
        raise ValueError(f"Unknown audit event type: {event_type}")
    names = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in metadata.items() if k in names})


@dataclass(frozen=True)
class AuditEvent:
    """Immutable, append-only record of something that happened to a delivery."""

    id: UUID
    delivery_id: UUID
    tenant_id: UUID
    actor: ActorKind
    payload: AuditPayload
    created_at: datetime

    @property
    def event_type(self) -> str:
        return self.payload.event_type
