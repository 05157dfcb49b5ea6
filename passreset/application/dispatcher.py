from __future__ import annotations

import logging

from pydantic import EmailStr, TypeAdapter, ValidationError

from passreset.application.passcode_manager import PasscodeManager
from passreset.application.rate_limiter import RateLimiter
from passreset.domain.entities import ErrorKind, Gate, Reply, Verification
from passreset.domain.services import normalize_code, normalize_identity

logger = logging.getLogger(__name__)

REQUEST = "request"
VERIFY = "verify"

# names used by the first generation of reset forms
ACTION_ALIASES = {
    "resetpassword": REQUEST,
    "verifypasscode": VERIFY,
}

VERIFICATION_ERRORS = {
    Verification.NOT_FOUND: "no code",
    Verification.EXPIRED: "expired",
}

_email_adapter = TypeAdapter(EmailStr)


def is_valid_email(value: str) -> bool:
    try:
        _email_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def _invalid(message: str) -> Reply:
    logger.debug("request rejected", extra={"reason": message})
    return Reply.fail(ErrorKind.VALIDATION, message)


class PasscodeDispatcher:
    """Routes one inbound action through the rate limiter to the passcode manager."""

    def __init__(self, limiter: RateLimiter, manager: PasscodeManager) -> None:
        self._limiter = limiter
        self._manager = manager

    async def dispatch(
        self,
        action: str | None,
        identity: str | None,
        code: str | int | None = None,
    ) -> Reply:
        identity = normalize_identity(identity)
        if identity is not None and not is_valid_email(identity):
            return _invalid("invalid email")

        action = (action or "").strip().lower()
        if not action:
            return _invalid("missing action")
        action = ACTION_ALIASES.get(action, action)

        if action == REQUEST:
            if identity is None:
                return _invalid("missing email")
            return await self.request(identity)
        if action == VERIFY:
            code = normalize_code(code)
            if identity is None or code is None:
                return _invalid("missing parameters")
            return await self.verify(identity, code)
        return _invalid("invalid action")

    async def request(self, identity: str) -> Reply:
        if await self._limiter.check_and_log(identity) is Gate.THROTTLED:
            return Reply.ok(throttled=True)

        issued = await self._manager.issue(identity)
        if not issued.delivered:
            return Reply.fail(ErrorKind.DELIVERY_FAILED, "passcode could not be sent")
        return Reply.ok(throttled=False)

    async def verify(self, identity: str, code: str) -> Reply:
        if await self._limiter.check_and_log(identity) is Gate.THROTTLED:
            return Reply.ok(throttled=True)

        outcome = await self._manager.verify(identity, code)
        if outcome is Verification.VALID:
            return Reply.ok(ok=True)
        return Reply.ok(ok=False, error=VERIFICATION_ERRORS[outcome])
