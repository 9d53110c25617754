"""PostgreSQL access token repository implementation."""

from datetime import datetime
from uuid import UUID

from psycopg import AsyncConnection

from handoff.domain.entities import AccessToken
from handoff.domain.value_objects import TokenType

_COLUMNS = (
    "id, delivery_id, tenant_id, token, type, created_at, expires_at, used_at, revoked_at"
)


def _row_to_token(r: tuple) -> AccessToken:
    return AccessToken(
        id=r[0],
        delivery_id=r[1],
        tenant_id=r[2],
        token=r[3],
        type=TokenType(r[4]),
        created_at=r[5],
        expires_at=r[6],
        used_at=r[7],
        revoked_at=r[8],
    )


class PostgresAccessTokenRepository:
    """Access token repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_token(self, token: str) -> AccessToken | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM access_token WHERE token = %s",
            (token,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return _row_to_token(r)

    async def list_by_delivery(self, delivery_id: UUID) -> list[AccessToken]:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM access_token WHERE delivery_id = %s ORDER BY created_at",
            (delivery_id,),
        )
        rows = await cur.fetchall()
        return [_row_to_token(r) for r in rows]

    async def create(self, access_token: AccessToken) -> AccessToken:
        await self._conn.execute(
            f"INSERT INTO access_token ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                access_token.id,
                access_token.delivery_id,
                access_token.tenant_id,
                access_token.token,
                access_token.type.value,
                access_token.created_at,
                access_token.expires_at,
                access_token.used_at,
                access_token.revoked_at,
            ),
        )
        return access_token

    async def mark_used(self, token_id: UUID, used_at: datetime) -> None:
        """Record the first download only."""
        await self._conn.execute(
            "UPDATE access_token SET used_at = %s WHERE id = %s AND used_at IS NULL",
            (used_at, token_id),
        )

    async def revoke(self, token_id: UUID, revoked_at: datetime) -> None:
        await self._conn.execute(
            "UPDATE access_token SET revoked_at = %s WHERE id = %s AND revoked_at IS NULL",
            (revoked_at, token_id),
        )
