"""Tests for VaultClient with hvac mocked out."""

from unittest.mock import MagicMock

import pytest
from hvac.exceptions import Forbidden, InvalidPath

from clients import vault_client as vault_module
from clients.vault_client import (
    VaultClient,
    VaultError,
    get_database_url,
    get_email_config,
)


@pytest.fixture
def vault_env(monkeypatch):
    monkeypatch.setenv("VAULT_ADDR", "https://vault.example.com")
    monkeypatch.setenv("VAULT_ROLE_ID", "role")
    monkeypatch.setenv("VAULT_SECRET_ID", "secret")
    monkeypatch.delenv("VAULT_NAMESPACE", raising=False)


@pytest.fixture
def hvac_client(monkeypatch, vault_env):
    """hvac.Client replaced by a MagicMock serving a small secret tree."""
    secrets = {
        "bookings/database": {"url": "postgresql://db/bookings"},
        "bookings/email": {
            "gateway_url": "https://mail.example.com/send",
            "api_key": "key",
            "hmac_secret": "shh",
        },
    }

    def read_secret_version(path, raise_on_deleted_version=True):
        if path not in secrets:
            raise InvalidPath()
        return {"data": {"data": secrets[path]}}

    client = MagicMock()
    client.auth.approle.login.return_value = {"auth": {"client_token": "tok"}}
    client.is_authenticated.return_value = True
    client.secrets.kv.v2.read_secret_version.side_effect = read_secret_version

    monkeypatch.setattr(vault_module.hvac, "Client", MagicMock(return_value=client))
    vault_module.reset_cache()
    yield client
    vault_module.reset_cache()


class TestInit:

    def test_missing_vault_addr(self, monkeypatch, vault_env):
        monkeypatch.delenv("VAULT_ADDR")
        with pytest.raises(ValueError, match="VAULT_ADDR"):
            VaultClient()

    def test_missing_approle_credentials(self, monkeypatch, vault_env):
        monkeypatch.delenv("VAULT_ROLE_ID")
        with pytest.raises(ValueError, match="VAULT_ROLE_ID"):
            VaultClient()

    def test_login_sets_token(self, hvac_client):
        client = VaultClient()

        hvac_client.auth.approle.login.assert_called_once_with(role_id="role", secret_id="secret")
        assert client.client.token == "tok"

    def test_login_rejected(self, hvac_client):
        hvac_client.auth.approle.login.side_effect = Forbidden()

        with pytest.raises(VaultError, match="AppRole"):
            VaultClient()


class TestGetSecret:

    def test_scoped_to_prefix(self, hvac_client):
        assert VaultClient().get_secret("database", "url") == "postgresql://db/bookings"

    def test_missing_path(self, hvac_client):
        with pytest.raises(VaultError, match="not found"):
            VaultClient().get_secret("stripe", "key")

    def test_missing_field(self, hvac_client):
        with pytest.raises(KeyError, match="password"):
            VaultClient().get_secret("database", "password")


class TestCachedGetters:

    def test_database_url_cached(self, hvac_client):
        assert get_database_url() == "postgresql://db/bookings"
        assert get_database_url() == "postgresql://db/bookings"

        assert hvac_client.secrets.kv.v2.read_secret_version.call_count == 1

    def test_email_config(self, hvac_client):
        assert get_email_config() == {
            "gateway_url": "https://mail.example.com/send",
            "api_key": "key",
            "hmac_secret": "shh",
        }
