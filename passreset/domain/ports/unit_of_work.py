from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import Protocol, Type

from passreset.domain.ports.passcode_repository import PasscodeRepositoryPort
from passreset.domain.ports.request_log_repository import RequestLogRepositoryPort


@dataclass
class UnitOfWorkPort(Protocol):
    """
    Transaction boundary. Re-enterable: each `async with` opens a new transaction.

    Usage:
        async with uow as tx:
            await tx.passcodes.delete_for(identity)
            await tx.passcodes.insert(identity, code, now)
            await tx.commit()
    """

    passcodes: PasscodeRepositoryPort
    request_log: RequestLogRepositoryPort

    async def __aenter__(self) -> "UnitOfWorkPort":
        """Begin a new transaction. Code here runs before code in the context manager."""

    async def __aexit__(
        self,
        exc_type: Type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """End the transaction, rolling back anything not committed."""

    async def commit(self) -> None:
        """Commit the transaction."""

    async def rollback(self) -> None:
        """Rollback the transaction."""
