from __future__ import annotations

from typing import Any, Optional, Type

import psycopg
from psycopg_pool import AsyncConnectionPool

from passreset.domain.ports.unit_of_work import UnitOfWorkPort
from passreset.infrastructure.db.passcodes_repo import PgPasscodeRepository
from passreset.infrastructure.db.request_log_repo import PgRequestLogRepository


class PgUnitOfWork(UnitOfWorkPort):
    """Borrows one pooled connection per `async with` block."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool
        self._conn_cm: Optional[Any] = None
        self._conn: Optional[psycopg.AsyncConnection] = None
        self._committed: bool = False
        self.passcodes: PgPasscodeRepository
        self.request_log: PgRequestLogRepository

    async def __aenter__(self) -> "PgUnitOfWork":
        if self._conn is not None:
            raise RuntimeError("unit of work is already in a transaction")
        self._conn_cm = self._pool.connection()
        self._conn = await self._conn_cm.__aenter__()
        self.passcodes = PgPasscodeRepository(self._conn)
        self.request_log = PgRequestLogRepository(self._conn)
        self._committed = False
        return self

    async def __aexit__(
        self,
        exc_type: Type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: Any,
    ) -> None:
        try:
            if self._conn and (exc_value or not self._committed):
                await self._conn.rollback()
        finally:
            if self._conn_cm:
                await self._conn_cm.__aexit__(exc_type, exc_value, traceback)
            self._conn = None
            self._conn_cm = None
            self._committed = False

    async def commit(self) -> None:
        if not self._conn:
            raise RuntimeError("No connection available to commit")
        await self._conn.commit()
        self._committed = True

    async def rollback(self) -> None:
        if self._conn:
            await self._conn.rollback()
        self._committed = False
