from datetime import timedelta

import pytest
from pydantic import ValidationError

from passreset.settings import Settings, get_settings


def test_get_settings_is_cached():
    get_settings.cache_clear()
    s1 = get_settings()
    s2 = get_settings()
    assert s1 is s2  # lru_cache returns the same instance


def test_policy_defaults(monkeypatch):
    for name in (
        "TOKEN_EXPIRY_MINUTES",
        "REQUEST_LOG_CLEANUP_HOURS",
        "BACKOFF_WINDOW_MINUTES",
        "BACKOFF_THRESHOLD_COUNT",
        "CODE_MIN",
        "CODE_MAX",
    ):
        monkeypatch.delenv(name, raising=False)
    s = Settings(_env_file=None)

    assert s.token_expiry == timedelta(minutes=5)
    assert s.request_log_cleanup == timedelta(hours=1)
    assert s.backoff_window == timedelta(minutes=60)
    assert s.backoff_threshold_count == 3
    assert (s.code_min, s.code_max) == (10000, 99999)
    assert "{code}" in s.mail_body and "{code}" in s.mail_alt_body


def test_env_overrides_and_cache_clear(monkeypatch):
    # override via env and ensure cache is respected
    monkeypatch.setenv("BACKOFF_THRESHOLD_COUNT", "7")
    get_settings.cache_clear()
    s = get_settings()
    assert s.backoff_threshold_count == 7

    # cleanup: remove env and reset cache
    monkeypatch.delenv("BACKOFF_THRESHOLD_COUNT", raising=False)
    get_settings.cache_clear()
    s2 = get_settings()
    assert s2.backoff_threshold_count != 7  # back to default or another env value


def test_inverted_code_range_is_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, code_min=500, code_max=100)


def test_zero_threshold_is_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, backoff_threshold_count=0)
