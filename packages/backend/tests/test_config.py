"""Settings tests — startup fails fast on bad auth config."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from helpers import make_settings
from taskflow.config import Settings


def test_missing_secret_fails_at_construction(monkeypatch):
    monkeypatch.delenv("TASKFLOW_JWT_SECRET", raising=False)
    with pytest.raises(ValidationError, match="TASKFLOW_JWT_SECRET"):
        Settings()


def test_secret_read_from_env(monkeypatch):
    monkeypatch.setenv("TASKFLOW_JWT_SECRET", "from-env-0123456789abcdef0123456789")
    monkeypatch.setenv("TASKFLOW_TOKEN_EXPIRE_HOURS", "2")
    settings = Settings()
    assert settings.jwt_secret == "from-env-0123456789abcdef0123456789"
    assert settings.token_lifetime == timedelta(hours=2)


def test_default_lifetime_is_seven_days():
    assert make_settings().token_lifetime == timedelta(days=7)


@pytest.mark.parametrize(
    "overrides",
    [{"token_expire_hours": 0}, {"bcrypt_rounds": 3}, {"bcrypt_rounds": 32}],
)
def test_nonsense_values_rejected(overrides):
    with pytest.raises(ValidationError):
        make_settings(**overrides)
