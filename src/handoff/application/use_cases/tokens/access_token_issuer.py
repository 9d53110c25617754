"""Access token issuing and validation."""

import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from handoff.application.dto.token_dto import TokenValidation
from handoff.application.use_cases.audit.audit_log import AuditLog
from handoff.domain.entities import AccessToken, Delivery, TokenRevoked
from handoff.domain.exceptions import InvalidState, NotFound, ValidationError
from handoff.domain.value_objects import ActorKind, DeliveryStatus, TokenStatus, TokenType

TOKEN_BYTES = 32


class AccessTokenIssuer:
    """Mints, validates and revokes download tokens for finalized deliveries.

    A token stays valid for repeated downloads until it expires or is
    revoked; the first download only stamps ``used_at``.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        audit_log: AuditLog,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit_log = audit_log
        self._clock = clock or (lambda: datetime.now(UTC))

    def mint(self, delivery: Delivery, token_type: TokenType, ttl: timedelta) -> AccessToken:
        """Create a new token for delivery without persisting it."""
        if ttl <= timedelta(0):
            raise ValidationError("Token TTL must be positive")
        now = self._clock()
        return AccessToken(
            id=uuid4(),
            delivery_id=delivery.id,
            tenant_id=delivery.tenant_id,
            token=secrets.token_urlsafe(TOKEN_BYTES),
            type=token_type,
            created_at=now,
            expires_at=now + ttl,
        )

    async def issue(
        self, delivery_id: UUID, token_type: TokenType, ttl: timedelta
    ) -> AccessToken:
        """Issue and persist a token for an already finalized delivery."""
        async with self._uow_factory() as uow:
            delivery = await uow.deliveries.get_by_id(delivery_id)
            if not delivery:
                raise NotFound("Delivery", delivery_id)
            if delivery.status != DeliveryStatus.FINALIZED:
                raise InvalidState("Tokens can only be issued for finalized deliveries")
            access_token = self.mint(delivery, token_type, ttl)
            await uow.access_tokens.create(access_token)
        return access_token

    async def validate(self, token: str) -> TokenValidation:
        """Check a token string. Revocation wins over expiry."""
        async with self._uow_factory() as uow:
            access_token = await uow.access_tokens.get_by_token(token)
        if not access_token:
            return TokenValidation(TokenStatus.NOT_FOUND)
        if access_token.revoked_at is not None:
            return TokenValidation(TokenStatus.REVOKED, access_token)
        if access_token.is_expired(self._clock()):
            return TokenValidation(TokenStatus.EXPIRED, access_token)
        return TokenValidation(TokenStatus.OK, access_token)

    async def mark_used(self, access_token: AccessToken) -> None:
        """Stamp the first download; later calls change nothing."""
        if access_token.used_at is not None:
            return
        async with self._uow_factory() as uow:
            await uow.access_tokens.mark_used(access_token.id, self._clock())

    async def revoke(self, token: str, actor: ActorKind = ActorKind.EMPLOYEE) -> AccessToken:
        """Revoke a token. Revoking twice keeps the first revocation time."""
        async with self._uow_factory() as uow:
            access_token = await uow.access_tokens.get_by_token(token)
            if not access_token:
                raise NotFound("AccessToken", token)
            if access_token.revoked_at is not None:
                return access_token
            delivery = await uow.deliveries.get_by_id(access_token.delivery_id)
            if not delivery:
                raise NotFound("Delivery", access_token.delivery_id)
            await uow.access_tokens.revoke(access_token.id, self._clock())
            await uow.audit_events.append(
                self._audit_log.record(delivery, TokenRevoked(token_id=str(access_token.id)), actor)
            )
            return await uow.access_tokens.get_by_token(token)
