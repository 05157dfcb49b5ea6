import pytest
from fastapi.testclient import TestClient

from passreset.main import create_app
from passreset.presentation.dependencies import get_clock, get_notifier, get_uow
from passreset.settings import Settings, get_settings
from tests.fakes import FakeClock, FakeNotifier, FakeUoW


@pytest.fixture()
def app_and_deps():
    app = create_app()
    uow = FakeUoW()
    notifier = FakeNotifier()
    clock = FakeClock()
    settings = Settings(_env_file=None, backoff_threshold_count=3)

    app.dependency_overrides[get_uow] = lambda: uow
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_settings] = lambda: settings

    try:
        yield app, uow, notifier, clock
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app_and_deps):
    app, _, _, _ = app_and_deps
    return TestClient(app, raise_server_exceptions=False)
