"""Lifespan middleware - opens the pool on startup, drains and closes on shutdown."""

from typing import Any

from psycopg_pool import AsyncConnectionPool

from handoff.application.use_cases.finalization.try_finalize import FinalizationCoordinator


class LifespanMiddleware:
    """Opens the connection pool on startup.

    On shutdown it first waits for pending delivery notifications, then
    closes the pool.
    """

    def __init__(
        self,
        pool: AsyncConnectionPool,
        coordinator: FinalizationCoordinator | None = None,
    ) -> None:
        self._pool = pool
        self._coordinator = coordinator

    async def process_startup(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        """Open pool when ASGI server starts."""
        await self._pool.open()

    async def process_shutdown(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        """Drain notifications, then close pool."""
        if self._coordinator is not None:
            await self._coordinator.wait_for_notifications()
        await self._pool.close()
