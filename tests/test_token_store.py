"""Tests for the GitHub token store."""

import json

import httpx
import pytest

from comistory.config import TOKEN_ENV_VAR
from comistory.token_store import TokenStore


def github_user_api(status_code=200, login="octocat", scopes="repo, read:user"):
    """Mock transport answering the /user endpoint."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/user"
        return httpx.Response(status_code, json={"login": login}, headers={"x-oauth-scopes": scopes})

    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture(autouse=True)
def no_env_token(monkeypatch):
    monkeypatch.delenv(TOKEN_ENV_VAR, raising=False)


@pytest.fixture
def store(tmp_path):
    return TokenStore(directory=tmp_path / "comistory", client=github_user_api())


def test_no_token_configured(store):
    assert store.get_token() is None
    assert store.get_token_status().is_configured is False


def test_save_and_read_token(store):
    assert store.save_token("ghp_abcdef123456")

    assert store.get_token() == "ghp_abcdef123456"
    assert json.loads(store.config_file.read_text()) == {"githubToken": "ghp_abcdef123456"}


def test_save_token_keeps_other_settings(store):
    store.directory.mkdir(parents=True)
    store.config_file.write_text(json.dumps({"theme": "dark"}))

    assert store.save_token("ghp_abcdef123456")
    assert json.loads(store.config_file.read_text()) == {"theme": "dark", "githubToken": "ghp_abcdef123456"}


@pytest.mark.parametrize("token", ["", "   "])
def test_save_blank_token(store, token):
    assert store.save_token(token) is False
    assert not store.config_file.exists()


@pytest.mark.parametrize("status_code", [401, 403, 500])
def test_save_invalid_token(tmp_path, status_code):
    store = TokenStore(directory=tmp_path, client=github_user_api(status_code=status_code))

    assert store.save_token("ghp_invalid") is False
    assert not store.config_file.exists()


def test_environment_token_wins(store, monkeypatch):
    store.save_token("ghp_from_file")
    monkeypatch.setenv(TOKEN_ENV_VAR, "ghp_from_env")

    assert store.get_token() == "ghp_from_env"


def test_malformed_config_file(store):
    store.directory.mkdir(parents=True)
    store.config_file.write_text("{not json")

    assert store.get_token() is None


def test_remove_token(store):
    store.save_token("ghp_abcdef123456")

    assert store.remove_token()
    assert store.get_token() is None
    assert json.loads(store.config_file.read_text()) == {}


def test_remove_without_config(store):
    assert store.remove_token()
    assert store.remove_token()


def test_token_status(store):
    store.save_token("ghp_abcdef123456")

    status = store.get_token_status()

    assert status.is_configured
    assert status.masked_token == "ghp_ab******"
    assert status.username == "octocat"
    assert status.scopes == ["repo", "read:user"]


def test_token_status_when_lookup_fails(tmp_path):
    store = TokenStore(directory=tmp_path, client=github_user_api(status_code=500))
    store.config_file.write_text(json.dumps({"githubToken": "ghp_abcdef123456"}))

    status = store.get_token_status()

    assert status.is_configured
    assert status.masked_token == "ghp_ab******"
    assert status.username is None


def test_injected_client_is_left_open(tmp_path):
    client = github_user_api()
    store = TokenStore(directory=tmp_path, client=client)

    assert store.validate_token("ghp_abcdef123456")
    assert not client.is_closed


def test_own_client_is_closed(tmp_path, monkeypatch):
    created = []
    real_client = httpx.Client

    def client_factory(**kwargs):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"login": "octocat"}))
        client = real_client(transport=transport, **kwargs)
        created.append(client)
        return client

    monkeypatch.setattr(httpx, "Client", client_factory)
    store = TokenStore(directory=tmp_path)

    assert store.validate_token("ghp_abcdef123456")
    assert len(created) == 1
    assert created[0].is_closed
