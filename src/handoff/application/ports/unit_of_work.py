"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from handoff.application.ports.repositories.access_token_repository import (
    AccessTokenRepository,
)
from handoff.application.ports.repositories.audit_event_repository import (
    AuditEventRepository,
)
from handoff.application.ports.repositories.delivery_repository import DeliveryRepository


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def deliveries(self) -> DeliveryRepository: ...

    @property
    def access_tokens(self) -> AccessTokenRepository: ...

    @property
    def audit_events(self) -> AuditEventRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
