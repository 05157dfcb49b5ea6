from __future__ import annotations

import logging
from datetime import timedelta

from passreset.domain.entities import Gate
from passreset.domain.ports.unit_of_work import UnitOfWorkPort
from passreset.domain.services import Clock, utcnow

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Sliding-window limiter over the persisted request log.

    An identity is throttled once it has `threshold` logged attempts younger
    than `window`. Throttled attempts are not logged, so the identity becomes
    clear again as soon as its oldest logged attempt ages out of the window.
    """

    def __init__(
        self,
        uow: UnitOfWorkPort,
        *,
        window: timedelta,
        threshold: int,
        clock: Clock = utcnow,
    ) -> None:
        if threshold < 1:
            raise ValueError("threshold must be at least 1")
        self._uow = uow
        self._window = window
        self._threshold = threshold
        self._clock = clock

    async def check_and_log(self, identity: str) -> Gate:
        now = self._clock()
        async with self._uow as transaction:
            await transaction.request_log.purge_identity_before(
                identity, now - self._window
            )
            attempts = await transaction.request_log.count_for(identity)
            if attempts >= self._threshold:
                await transaction.commit()
                logger.info(
                    "attempt throttled",
                    extra={"identity": identity, "attempts": attempts},
                )
                return Gate.THROTTLED

            await transaction.request_log.append(identity, now)
            await transaction.commit()
        return Gate.CLEAR

    async def purge_identity(self, identity: str) -> int:
        """Drop the identity's log rows that fell out of the window."""
        now = self._clock()
        async with self._uow as transaction:
            removed = await transaction.request_log.purge_identity_before(
                identity, now - self._window
            )
            await transaction.commit()
        return removed
