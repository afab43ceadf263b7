"""Unit Tests: settings, user .env handling and logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from dpd_pl.core.config import DPDSettings, load_settings, write_user_env_vars
from dpd_pl.core.endpoints import Environment
from dpd_pl.core.errors import ConfigurationError
from dpd_pl.core.invoker import RetryPolicy
from dpd_pl.core.log import ROOT_LOGGER, setup_logging


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for name in ("LOGIN", "PASSWORD", "MASTER_FID", "ENVIRONMENT", "TIMEOUT_MS", "MAX_RETRIES"):
        monkeypatch.delenv(f"DPD_{name}", raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults():
    settings = DPDSettings(_env_file=None)

    assert settings.environment is Environment.PRODUCTION
    assert settings.timeout_ms == 30_000
    assert settings.max_retries == 3
    assert settings.retry_delay_ms == 1_000


def test_env_vars_are_read(monkeypatch):
    monkeypatch.setenv("DPD_LOGIN", "user")
    monkeypatch.setenv("DPD_ENVIRONMENT", "demo")
    monkeypatch.setenv("DPD_MAX_RETRIES", "5")

    settings = DPDSettings(_env_file=None)

    assert settings.login == "user"
    assert settings.environment is Environment.DEMO
    assert settings.max_retries == 5


@pytest.mark.parametrize(
    "overrides",
    [{"timeout_ms": 999}, {"timeout_ms": 60_001}, {"max_retries": 6}, {"environment": "staging"}],
)
def test_out_of_bounds_values_are_configuration_errors(overrides):
    with pytest.raises(ConfigurationError):
        load_settings(**overrides)


def test_missing_credentials_are_named():
    settings = DPDSettings(_env_file=None, login="user")

    with pytest.raises(ConfigurationError) as info:
        settings.credentials()

    assert "DPD_PASSWORD" in info.value.message
    assert "DPD_MASTER_FID" in info.value.message
    assert "DPD_LOGIN" not in info.value.message


def test_credentials_are_frozen_and_hide_password():
    creds = DPDSettings(_env_file=None, login="u", password="p", master_fid="1495").credentials()

    assert creds.to_wire() == {"login": "u", "password": "p", "masterFid": "1495"}
    assert "p'" not in repr(creds)
    with pytest.raises(Exception):
        creds.login = "other"


def test_retry_policy_from_settings():
    settings = DPDSettings(_env_file=None, timeout_ms=2_000, max_retries=1, retry_delay_ms=250)

    policy = RetryPolicy.from_settings(settings)

    assert policy == RetryPolicy(max_retries=1, base_delay=0.25, timeout=2.0)


def test_write_user_env_vars_merges(tmp_path):
    env_path = tmp_path / "cfg" / ".env"
    env_path.parent.mkdir()
    env_path.write_text("DPD_LOGIN=old\nDPD_ENVIRONMENT=demo\n", encoding="utf-8")

    write_user_env_vars({"DPD_LOGIN": "new", "DPD_PASSWORD": "pw"}, env_path)

    text = env_path.read_text(encoding="utf-8")
    assert "DPD_LOGIN=new" in text
    assert "DPD_ENVIRONMENT=demo" in text
    assert "DPD_PASSWORD=pw" in text


def test_settings_read_project_env_file(tmp_path):
    env_file = tmp_path / ".env"
    write_user_env_vars({"DPD_LOGIN": "from-file", "DPD_ENVIRONMENT": "demo"}, env_file)

    settings = DPDSettings(_env_file=env_file)

    assert settings.login == "from-file"
    assert settings.environment is Environment.DEMO


def test_setup_logging_is_idempotent():
    log = setup_logging("INFO")
    setup_logging("DEBUG")

    assert log.name == ROOT_LOGGER
    assert log.level == logging.DEBUG
    assert sum(isinstance(h, RichHandler) for h in log.handlers) == 1
