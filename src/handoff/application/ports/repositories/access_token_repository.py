"""Access token repository port."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from handoff.domain.entities import AccessToken


class AccessTokenRepository(Protocol):
    """Port for access token persistence."""

    async def get_by_token(self, token: str) -> AccessToken | None: ...

    async def list_by_delivery(self, delivery_id: UUID) -> list[AccessToken]: ...

    async def create(self, access_token: AccessToken) -> AccessToken: ...

    async def mark_used(self, token_id: UUID, used_at: datetime) -> None:
        """Set used_at unless already set."""
        ...

    async def revoke(self, token_id: UUID, revoked_at: datetime) -> None: ...
