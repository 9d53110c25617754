"""PostgreSQL Unit of Work implementation."""

from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from psycopg import AsyncConnection
from psycopg_pool import AsyncConnectionPool

from handoff.infrastructure.persistence.postgres.access_token_repository import (
    PostgresAccessTokenRepository,
)
from handoff.infrastructure.persistence.postgres.audit_event_repository import (
    PostgresAuditEventRepository,
)
from handoff.infrastructure.persistence.postgres.delivery_repository import (
    PostgresDeliveryRepository,
)


class PostgresUnitOfWork:
    """Repositories sharing one pooled connection, hence one transaction.

    The finalization commit (FINALIZED transition, both access tokens and the
    audit event) relies on all three repositories writing through the same
    connection.
    """

    def __init__(self, conn: AsyncConnection) -> None:
        self.connection = conn
        self.deliveries = PostgresDeliveryRepository(conn)
        self.access_tokens = PostgresAccessTokenRepository(conn)
        self.audit_events = PostgresAuditEventRepository(conn)

    async def commit(self) -> None:
        await self.connection.commit()

    async def rollback(self) -> None:
        await self.connection.rollback()


def create_uow_factory(
    pool: AsyncConnectionPool,
) -> Callable[[], AbstractAsyncContextManager[PostgresUnitOfWork]]:
    """Create UnitOfWork factory: commit when the block exits, rollback on error."""

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        async with pool.connection() as conn:
            uow = PostgresUnitOfWork(conn)
            try:
                yield uow
            except BaseException:
                await uow.rollback()
                raise
            await uow.commit()

    return factory
