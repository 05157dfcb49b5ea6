from typing import Annotated

from fastapi import Depends, Request

from passreset.application.dispatcher import PasscodeDispatcher
from passreset.application.passcode_manager import PasscodeManager
from passreset.application.rate_limiter import RateLimiter
from passreset.domain.ports.notifier import PasscodeNotifier
from passreset.domain.ports.unit_of_work import UnitOfWorkPort
from passreset.domain.services import Clock, utcnow
from passreset.infrastructure.db.pool import get_pool
from passreset.infrastructure.db.uow import PgUnitOfWork
from passreset.settings import Settings, get_settings


def get_uow() -> UnitOfWorkPort:
    return PgUnitOfWork(get_pool())


def get_clock() -> Clock:
    return utcnow


def get_notifier(request: Request) -> PasscodeNotifier:
    # This is set in passreset.main lifespan()
    return request.app.state.notifier


def get_rate_limiter(
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
    clock: Annotated[Clock, Depends(get_clock)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> RateLimiter:
    return RateLimiter(
        uow,
        window=settings.backoff_window,
        threshold=settings.backoff_threshold_count,
        clock=clock,
    )


def get_passcode_manager(
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
    notifier: Annotated[PasscodeNotifier, Depends(get_notifier)],
    clock: Annotated[Clock, Depends(get_clock)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> PasscodeManager:
    return PasscodeManager(
        uow,
        notifier,
        expiry=settings.token_expiry,
        cleanup_horizon=settings.request_log_cleanup,
        code_range=(settings.code_min, settings.code_max),
        clock=clock,
    )


def get_dispatcher(
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
    manager: Annotated[PasscodeManager, Depends(get_passcode_manager)],
) -> PasscodeDispatcher:
    return PasscodeDispatcher(limiter, manager)
