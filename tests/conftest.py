from datetime import timedelta

import pytest

from passreset.application.dispatcher import PasscodeDispatcher
from passreset.application.passcode_manager import PasscodeManager
from passreset.application.rate_limiter import RateLimiter
from tests.fakes import FakeClock, FakeFailingNotifier, FakeNotifier, FakeUoW


@pytest.fixture()
def uow():
    return FakeUoW()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def notifier():
    return FakeNotifier()


@pytest.fixture()
def failing_notifier():
    return FakeFailingNotifier()


@pytest.fixture()
def limiter(uow, clock):
    return RateLimiter(uow, window=timedelta(minutes=60), threshold=3, clock=clock)


@pytest.fixture()
def manager(uow, notifier, clock):
    return PasscodeManager(
        uow,
        notifier,
        expiry=timedelta(minutes=5),
        cleanup_horizon=timedelta(hours=1),
        clock=clock,
    )


@pytest.fixture()
def dispatcher(limiter, manager):
    return PasscodeDispatcher(limiter, manager)


@pytest.fixture(autouse=True)
def patch_code(monkeypatch):
    """
    Make issued passcodes deterministic in all tests.
    You can override in a specific test by re-monkeypatching.
    """
    from passreset.domain import services as domain_services

    monkeypatch.setattr(
        domain_services, "generate_passcode", lambda low=10000, high=99999: "12345"
    )
    yield
