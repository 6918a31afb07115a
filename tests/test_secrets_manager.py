import json

import pytest

from app.secrets_manager import SecretsManager


class FakeSecretsClient:
    def __init__(self, secrets):
        self.secrets = secrets
        self.calls = []
        self.fail = False

    def get_secret_value(self, SecretId):
        self.calls.append(SecretId)
        if self.fail:
            raise RuntimeError("secrets manager unavailable")
        return {"SecretString": self.secrets[SecretId]}


def make_manager(cache_ttl=300, **secrets):
    manager = SecretsManager(region_name="us-east-1", cache_ttl=cache_ttl)
    manager._client = FakeSecretsClient(secrets)
    return manager


def test_get_secret_is_cached():
    manager = make_manager(api_key="s3cret")

    assert manager.get_secret("api_key") == "s3cret"
    assert manager.get_secret("api_key") == "s3cret"
    assert manager.client.calls == ["api_key"]


def test_expired_secret_is_refetched():
    manager = make_manager(cache_ttl=0, api_key="v1")
    manager.get_secret("api_key")
    manager.client.secrets["api_key"] = "v2"

    assert manager.get_secret("api_key") == "v2"
    assert manager.client.calls == ["api_key", "api_key"]


def test_stale_value_served_when_refresh_fails():
    manager = make_manager(cache_ttl=0, api_key="v1")
    manager.get_secret("api_key")
    manager.client.fail = True

    assert manager.get_secret("api_key") == "v1"


def test_fetch_failure_without_cache_propagates():
    manager = make_manager(api_key="v1")
    manager.client.fail = True

    with pytest.raises(RuntimeError):
        manager.get_secret("api_key")


def test_clear_cache_forces_fetch():
    manager = make_manager(api_key="v1")
    manager.get_secret("api_key")
    manager.clear_cache()
    manager.get_secret("api_key")

    assert manager.client.calls == ["api_key", "api_key"]


def test_get_db_credentials(monkeypatch):
    monkeypatch.setenv("DATABASE_SECRETS_NAME", "bemore/test-db")
    credentials = {"username": "bemore", "password": "pw", "host": "db", "port": 5432, "dbname": "bemore"}
    manager = make_manager(**{"bemore/test-db": json.dumps(credentials)})

    assert manager.get_db_credentials() == credentials
