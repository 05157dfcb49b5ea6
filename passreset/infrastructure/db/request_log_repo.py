from __future__ import annotations

from datetime import datetime

import psycopg

from passreset.domain.ports.request_log_repository import RequestLogRepositoryPort


class PgRequestLogRepository(RequestLogRepositoryPort):
    """Postgres request log, bound to the UoW's connection. Never commits."""

    def __init__(self, conn: psycopg.AsyncConnection) -> None:
        self._conn = conn

    async def purge_identity_before(self, identity: str, cutoff: datetime) -> int:
        sql = "DELETE FROM request_log WHERE identity = %s AND at < %s"
        async with self._conn.cursor() as cur:
            await cur.execute(sql, (identity, cutoff))
            return cur.rowcount

    async def count_for(self, identity: str) -> int:
        sql = "SELECT COUNT(*) FROM request_log WHERE identity = %s"
        async with self._conn.cursor() as cur:
            await cur.execute(sql, (identity,))
            row = await cur.fetchone()
        return int(row[0]) if row else 0

    async def append(self, identity: str, at: datetime) -> None:
        sql = "INSERT INTO request_log (identity, at) VALUES (%s, %s)"
        async with self._conn.cursor() as cur:
            await cur.execute(sql, (identity, at))

    async def purge_before(self, cutoff: datetime) -> int:
        async with self._conn.cursor() as cur:
            await cur.execute("DELETE FROM request_log WHERE at < %s", (cutoff,))
            return cur.rowcount
