"""Access token entity."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from handoff.domain.value_objects import TokenType


@dataclass
class AccessToken:
    """Time-boxed, revocable credential for downloading a final document."""

    id: UUID
    delivery_id: UUID
    tenant_id: UUID
    token: str
    type: TokenType
    created_at: datetime
    expires_at: datetime
    used_at: datetime | None = None
    revoked_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
