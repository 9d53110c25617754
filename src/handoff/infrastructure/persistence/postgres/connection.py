"""PostgreSQL async connection pool."""

from psycopg_pool import AsyncConnectionPool


def create_pool(conninfo: str, min_size: int = 2, max_size: int = 10) -> AsyncConnectionPool:
    """Create the async connection pool for delivery state.

    The pool starts closed; LifespanMiddleware opens it on ASGI startup.
    Connections are checked before being handed out, so a restarted
    database does not surface as a failed finalization.
    """
    return AsyncConnectionPool(
        conninfo=conninfo,
        min_size=min_size,
        max_size=max_size,
        open=False,
        name="handoff",
        check=AsyncConnectionPool.check_connection,
    )
