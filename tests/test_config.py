import pytest

from etherscan_gateway.config import load_config


def test_api_key_is_required(monkeypatch):
    monkeypatch.delenv("ETHERSCAN_API_KEY", raising=False)
    with pytest.raises(ValueError):
        load_config()


def test_defaults(monkeypatch):
    for name in ("ETHERSCAN_BASE_URL", "REQUEST_TIMEOUT", "RPC_TIMEOUT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ETHERSCAN_API_KEY", "abc")

    config = load_config()

    assert config.api_key == "abc"
    assert config.base_url == "https://api.etherscan.io/v2/api"
    assert config.request_timeout == 10
    assert config.rpc_timeout == 15
    assert config.log_level == "INFO"


def test_overrides(monkeypatch):
    monkeypatch.setenv("ETHERSCAN_API_KEY", "abc")
    monkeypatch.setenv("ETHERSCAN_BASE_URL", "https://proxy.example.test/api/")
    monkeypatch.setenv("REQUEST_TIMEOUT", "5")
    monkeypatch.setenv("RPC_TIMEOUT", "7.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = load_config()

    assert config.base_url == "https://proxy.example.test/api"
    assert config.request_timeout == 5
    assert config.rpc_timeout == 7.5
    assert config.log_level == "DEBUG"
