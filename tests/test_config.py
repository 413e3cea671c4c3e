import pytest

from ghproxy.config import (
    DEFAULT_CACHE_SECONDS,
    Credentials,
    load_client_config,
    load_proxy_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "GITHUB_TOKEN",
        "GITHUB_CLIENT_ID",
        "GITHUB_CLIENT_SECRET",
        "GITHUB_PROXY_URL",
        "GITHUB_PROXY_CACHE",
        "GITHUB_PROXY_CACHE_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_credential_strategy_priority():
    assert Credentials(token="t", client_id="i", client_secret="s").strategy == "token"
    assert Credentials(client_id="i", client_secret="s").strategy == "client"
    assert Credentials(client_id="i").strategy is None
    assert Credentials(token="").usable is False


def test_load_proxy_config_reads_environment(monkeypatch):
    monkeypatch.setenv("GITHUB_CLIENT_ID", "Iv1.id")
    monkeypatch.setenv("GITHUB_CLIENT_SECRET", "secret")
    monkeypatch.setenv("GITHUB_TOKEN", "")

    cfg = load_proxy_config()

    assert cfg.credentials.token is None
    assert cfg.credentials.strategy == "client"
    assert cfg.api_base == "https://api.github.com/"
    assert cfg.graphql_url == "https://api.github.com/graphql"


def test_load_proxy_config_without_credentials_is_not_an_error():
    cfg = load_proxy_config()

    assert cfg.credentials.usable is False


def test_load_client_config_requires_proxy_url():
    with pytest.raises(RuntimeError, match="GITHUB_PROXY_URL"):
        load_client_config()


def test_load_client_config_defaults(monkeypatch):
    monkeypatch.setenv("GITHUB_PROXY_URL", "https://proxy.example.com/api/github/")

    cfg = load_client_config()

    assert cfg.proxy_url == "https://proxy.example.com/api/github"
    assert cfg.cache_target is None
    assert cfg.cache_seconds == DEFAULT_CACHE_SECONDS == 86400


def test_load_client_config_rejects_bad_duration(monkeypatch):
    monkeypatch.setenv("GITHUB_PROXY_URL", "https://proxy.example.com")
    monkeypatch.setenv("GITHUB_PROXY_CACHE_SECONDS", "a day")

    with pytest.raises(RuntimeError, match="GITHUB_PROXY_CACHE_SECONDS"):
        load_client_config()
