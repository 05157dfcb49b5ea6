from __future__ import annotations

from datetime import datetime
from typing import Protocol


class RequestLogRepositoryPort(Protocol):
    async def purge_identity_before(self, identity: str, cutoff: datetime) -> int:
        """Delete rows of `identity` older than `cutoff`. Returns rows removed."""

    async def count_for(self, identity: str) -> int:
        """Number of rows currently logged for `identity`."""

    async def append(self, identity: str, at: datetime) -> None:
        """Log one attempt for `identity`."""

    async def purge_before(self, cutoff: datetime) -> int:
        """Delete rows of every identity older than `cutoff`. Returns rows removed."""
