from __future__ import annotations

from typing import Protocol


class PasscodeNotifier(Protocol):
    async def deliver(self, identity: str, code: str) -> None:
        """Hand the passcode to the requester out of band. Raises DeliveryFailed."""
