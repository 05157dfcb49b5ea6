from __future__ import annotations

from datetime import datetime
from typing import Optional

import psycopg

from passreset.domain.entities import Passcode
from passreset.domain.ports.passcode_repository import PasscodeRepositoryPort


class PgPasscodeRepository(PasscodeRepositoryPort):
    """
    Postgres implementation of PasscodeRepositoryPort.

    NOTE:
    - Constructed with an *active async connection* supplied by the UoW.
    - It does not commit; the UnitOfWork controls the transaction boundary.
    """

    def __init__(self, conn: psycopg.AsyncConnection) -> None:
        self._conn = conn

    async def delete_for(self, identity: str) -> None:
        async with self._conn.cursor() as cur:
            await cur.execute("DELETE FROM passcodes WHERE identity = %s", (identity,))

    async def insert(self, identity: str, code: str, issued_at: datetime) -> Passcode:
        sql = """
        INSERT INTO passcodes (identity, code, issued_at)
        VALUES (%s, %s, %s)
        RETURNING identity, code, issued_at
        """
        async with self._conn.cursor() as cur:
            await cur.execute(sql, (identity, code, issued_at))
            row = await cur.fetchone()

        if not row:
            raise RuntimeError("insert into passcodes returned no row")
        return _to_passcode(row)

    async def find_matching(self, identity: str, code: str) -> Optional[Passcode]:
        sql = """
        SELECT identity, code, issued_at
        FROM passcodes
        WHERE identity = %s AND code = %s
        """
        async with self._conn.cursor() as cur:
            await cur.execute(sql, (identity, code))
            row = await cur.fetchone()
        return _to_passcode(row) if row else None

    async def get_for(self, identity: str) -> Optional[Passcode]:
        sql = "SELECT identity, code, issued_at FROM passcodes WHERE identity = %s"
        async with self._conn.cursor() as cur:
            await cur.execute(sql, (identity,))
            row = await cur.fetchone()
        return _to_passcode(row) if row else None


def _to_passcode(row: tuple) -> Passcode:
    identity, code, issued_at = row
    return Passcode(identity=str(identity), code=str(code), issued_at=issued_at)
