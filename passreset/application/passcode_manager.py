from __future__ import annotations

import logging
from datetime import timedelta

import passreset.domain.services as domain_services
from passreset.domain.entities import Issued, Verification
from passreset.domain.errors import DeliveryFailed
from passreset.domain.ports.notifier import PasscodeNotifier
from passreset.domain.ports.unit_of_work import UnitOfWorkPort
from passreset.domain.services import Clock, utcnow

logger = logging.getLogger(__name__)


class PasscodeManager:
    """
    Owns the passcode relation: one live passcode per identity.

    Callers are expected to have passed the rate limiter already.
    """

    def __init__(
        self,
        uow: UnitOfWorkPort,
        notifier: PasscodeNotifier,
        *,
        expiry: timedelta,
        cleanup_horizon: timedelta,
        code_range: tuple[int, int] = (10000, 99999),
        clock: Clock = utcnow,
    ) -> None:
        self._uow = uow
        self._notifier = notifier
        self._expiry = expiry
        self._cleanup_horizon = cleanup_horizon
        self._code_low, self._code_high = code_range
        self._clock = clock

    async def issue(self, identity: str) -> Issued:
        code = domain_services.generate_passcode(self._code_low, self._code_high)
        async with self._uow as transaction:
            await transaction.passcodes.delete_for(identity)
            await transaction.passcodes.insert(identity, code, self._clock())
            await transaction.commit()
        logger.info("passcode issued", extra={"identity": identity})

        # The stored passcode survives a failed delivery; the requester retries.
        try:
            await self._notifier.deliver(identity, code)
        except DeliveryFailed as e:
            logger.warning(
                "passcode delivery failed",
                extra={"identity": identity, "error": str(e)},
            )
            return Issued(code=code, delivery_error=str(e))
        return Issued(code=code)

    async def verify(self, identity: str, code: str) -> Verification:
        await self.purge_request_log()

        now = self._clock()
        async with self._uow as transaction:
            passcode = await transaction.passcodes.find_matching(identity, code)

        if passcode is None:
            outcome = Verification.NOT_FOUND
        elif passcode.is_expired(now, self._expiry):
            outcome = Verification.EXPIRED
        else:
            outcome = Verification.VALID
        logger.info(
            "passcode verified",
            extra={"identity": identity, "outcome": outcome.value},
        )
        return outcome

    async def purge_request_log(self) -> int:
        """Drop request-log rows of every identity older than the cleanup horizon."""
        cutoff = self._clock() - self._cleanup_horizon
        async with self._uow as transaction:
            removed = await transaction.request_log.purge_before(cutoff)
            await transaction.commit()
        logger.debug("request log purged", extra={"removed": removed})
        return removed
