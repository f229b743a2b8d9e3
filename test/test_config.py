import importlib

import pytest

from gas_estimator.core.config import load_settings
from gas_estimator.core.config_validator import validate
from gas_estimator.core.errors import ConfigError


def test_defaults():
    s = load_settings(ETHEREUM_RPC_URLS="http://127.0.0.1:8545")
    assert s.CACHE_DURATION_SECONDS == 0
    assert s.PORT == 8080
    assert str(s.HOST) == "0.0.0.0"
    assert s.ethereum_rpc_url == "http://127.0.0.1:8545"


def test_first_of_several_urls_is_used():
    s = load_settings(ETHEREUM_RPC_URLS=" https://a.example , https://b.example")
    assert s.rpc_urls == ["https://a.example", "https://b.example"]
    assert validate(s).ethereum_rpc_url == "https://a.example"


def test_env_is_read(monkeypatch):
    monkeypatch.setenv("ETHEREUM_RPC_URLS", "http://node:8545")
    monkeypatch.setenv("CACHE_DURATION_SECONDS", "15")
    s = load_settings()
    assert s.ethereum_rpc_url == "http://node:8545"
    assert s.CACHE_DURATION_SECONDS == 15


@pytest.mark.parametrize("overrides", [
    {"PORT": 0},
    {"HOST": "not-an-ip"},
    {"CACHE_DURATION_SECONDS": -1},
    {"CACHE_DURATION_SECONDS": "soon"},
])
def test_invalid_values_are_config_errors(overrides):
    with pytest.raises(ConfigError):
        load_settings(**overrides)


def test_missing_url_fails_validation():
    with pytest.raises(ConfigError, match="No Ethereum RPC URLs provided"):
        validate(load_settings(ETHEREUM_RPC_URLS=None))


def test_non_http_url_fails_validation():
    with pytest.raises(ConfigError):
        validate(load_settings(ETHEREUM_RPC_URLS="ftp://node"))


def test_bad_environment_exits_at_import(monkeypatch):
    """
    GIVEN an environment that fails validation
    WHEN the config module is imported
    THEN the process exits instead of leaking a traceback past startup handling.
    """
    from gas_estimator.core import config

    monkeypatch.setenv("CACHE_DURATION_SECONDS", "-1")
    try:
        with pytest.raises(SystemExit) as excinfo:
            importlib.reload(config)
        assert excinfo.value.code == 1
    finally:
        monkeypatch.delenv("CACHE_DURATION_SECONDS")
        importlib.reload(config)
