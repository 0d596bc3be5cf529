"""Tests for BurrowSettings."""

import pytest

from burrow import settings as settings_module
from burrow.settings import BurrowSettings, get_settings, reload_settings

ENV_VARS = [
    "BURROW_ENDPOINT", "RABBITMQ_ENDPOINT",
    "BURROW_USERNAME", "RABBITMQ_USERNAME",
    "BURROW_PASSWORD", "RABBITMQ_PASSWORD",
    "BURROW_INSECURE", "RABBITMQ_INSECURE",
    "BURROW_CACERT_FILE", "RABBITMQ_CACERT",
    "BURROW_CREATE_TIMEOUT", "BURROW_RETRY_INTERVAL", "BURROW_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without Burrow/RabbitMQ environment variables."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    yield
    settings_module._settings = None


def test_defaults():
    settings = BurrowSettings(_env_file=None)

    assert settings.endpoint == "http://localhost:15672"
    assert settings.username == "guest"
    assert settings.password.get_secret_value() == "guest"
    assert settings.insecure is False
    assert settings.cacert_file is None
    assert settings.create_timeout == 1200.0
    assert settings.retry_interval == 2.0
    assert settings.log_level == "INFO"


def test_burrow_prefixed_env(monkeypatch):
    monkeypatch.setenv("BURROW_ENDPOINT", "https://rabbit.internal:15671")
    monkeypatch.setenv("BURROW_PASSWORD", "s3cret")
    monkeypatch.setenv("BURROW_CREATE_TIMEOUT", "30")
    monkeypatch.setenv("BURROW_RETRY_INTERVAL", "0.5")

    settings = BurrowSettings(_env_file=None)

    assert settings.endpoint == "https://rabbit.internal:15671"
    assert settings.password.get_secret_value() == "s3cret"
    assert settings.create_timeout == 30.0
    assert settings.retry_interval == 0.5


def test_rabbitmq_env_names_accepted(monkeypatch):
    """Test that the RABBITMQ_* names used by other tooling work."""
    monkeypatch.setenv("RABBITMQ_ENDPOINT", "http://mq:15672")
    monkeypatch.setenv("RABBITMQ_USERNAME", "ops")
    monkeypatch.setenv("RABBITMQ_INSECURE", "true")
    monkeypatch.setenv("RABBITMQ_CACERT", "/etc/ssl/mq.pem")

    settings = BurrowSettings(_env_file=None)

    assert settings.endpoint == "http://mq:15672"
    assert settings.username == "ops"
    assert settings.insecure is True
    assert settings.cacert_file == "/etc/ssl/mq.pem"


def test_burrow_name_wins_over_rabbitmq_name(monkeypatch):
    monkeypatch.setenv("BURROW_ENDPOINT", "http://burrow:15672")
    monkeypatch.setenv("RABBITMQ_ENDPOINT", "http://rabbitmq:15672")

    assert BurrowSettings(_env_file=None).endpoint == "http://burrow:15672"


def test_password_is_masked():
    settings = BurrowSettings(_env_file=None, password="s3cret")

    assert "s3cret" not in repr(settings)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_reload_settings_picks_up_env(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("BURROW_LOG_LEVEL", "DEBUG")

    reloaded = reload_settings()

    assert reloaded is not first
    assert reloaded.log_level == "DEBUG"
    assert get_settings() is reloaded
