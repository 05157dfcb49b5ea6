from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from passreset.domain.entities import Passcode


class PasscodeRepositoryPort(Protocol):
    async def delete_for(self, identity: str) -> None:
        """Remove the passcode of `identity`, if any."""

    async def insert(self, identity: str, code: str, issued_at: datetime) -> Passcode:
        """
        Insert a fresh passcode. The caller must have deleted the previous one
        in the same transaction; the identity is a unique key.
        """

    async def find_matching(self, identity: str, code: str) -> Optional[Passcode]:
        """Return the passcode matching both identity and code exactly."""

    async def get_for(self, identity: str) -> Optional[Passcode]:
        """Return the live passcode of `identity` regardless of its code."""
