import pytest

from gitwebhookproxy.config import Settings
from gitwebhookproxy.exceptions import ConfigurationError
from gitwebhookproxy.proxy import Proxy


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("UPSTREAM_URL", "https://jenkins.example.com/github-webhook")
    monkeypatch.setenv("ALLOWED_PATHS", "/repo1, /repo2/ ,,")
    monkeypatch.setenv("PROVIDER", "gitlab")
    monkeypatch.setenv("SECRET", "s3cr3t")
    monkeypatch.setenv("LISTEN_ADDRESS", "127.0.0.1:9090")

    settings = Settings(_env_file=None)

    assert settings.allowed_path_list == ["/repo1", "/repo2/"]
    assert settings.host == "127.0.0.1"
    assert settings.port == 9090

    proxy = Proxy.from_settings(settings)
    assert proxy.provider == "gitlab"
    assert proxy.is_path_allowed("/repo2")
    assert not proxy.is_path_allowed("/repo3")


def test_default_listen_address_binds_all_interfaces():
    settings = Settings(_env_file=None, listen_address=":8080")

    assert settings.host == "0.0.0.0"
    assert settings.port == 8080


def test_empty_allowed_paths_allow_everything():
    settings = Settings(_env_file=None, allowed_paths="")

    assert settings.allowed_path_list == []


@pytest.mark.parametrize("address", ["", "   ", "localhost", "localhost:http"])
def test_invalid_listen_address(address):
    settings = Settings(_env_file=None, listen_address=address)

    with pytest.raises(ConfigurationError):
        settings.port


def test_missing_secret_is_fatal():
    settings = Settings(_env_file=None, upstream_url="http://upstream.test", secret="")

    with pytest.raises(ConfigurationError):
        Proxy.from_settings(settings)
