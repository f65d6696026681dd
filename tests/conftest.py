"""Provide common pytest fixtures."""

import json
import time

import pytest
from aioresponses import aioresponses

import easeehttp.__main__ as main
from easeehttp.credential import Credential, CredentialStore
from tests.common import load_fixture

TEST_HOST = "https://api.easee.test"
TEST_URL_TOKEN = f"{TEST_HOST}/api/accounts/token"
TEST_URL_REFRESH = f"{TEST_HOST}/api/accounts/refresh_token"
TEST_URL_CHARGERS = f"{TEST_HOST}/api/chargers"
TEST_USER = "testuser@example.com"
TEST_PASSWORD = "fakepassword"


def stored_credential(expires, access_token="A0", refresh_token="R0"):
    """Return a credential expiring at ``expires``."""
    return Credential(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="Bearer",
        expires_in=3600,
        expires=expires,
    )


@pytest.fixture(name="store")
def store(tmp_path):
    """Return an empty credential store."""
    return CredentialStore(tmp_path / "data" / "auth.json")


@pytest.fixture(name="valid_store")
def valid_store(store):
    """Return a store holding an unexpired credential."""
    store.save(stored_credential(int(time.time()) + 3600))
    return store


@pytest.fixture(name="expired_store")
def expired_store(store):
    """Return a store holding a credential that expired 10 seconds ago."""
    store.save(stored_credential(int(time.time()) - 10))
    return store


@pytest.fixture(name="test_account")
def test_account(valid_store):
    """Return a client with a usable stored credential."""
    return main.EaseeCloud(TEST_HOST, TEST_USER, TEST_PASSWORD, store=valid_store)


@pytest.fixture(name="test_account_login")
def test_account_login(store, mock_aioclient):
    """Return a client that must log in first."""
    mock_aioclient.post(
        TEST_URL_TOKEN,
        status=200,
        body=load_fixture("token.json"),
    )
    return main.EaseeCloud(TEST_HOST, TEST_USER, TEST_PASSWORD, store=store)


@pytest.fixture(name="test_account_login_err")
def test_account_login_err(store, mock_aioclient):
    """Return a client whose login is rejected."""
    mock_aioclient.post(
        TEST_URL_TOKEN,
        status=400,
        body=json.dumps({"title": "Invalid credentials"}),
    )
    return main.EaseeCloud(TEST_HOST, TEST_USER, TEST_PASSWORD, store=store)


@pytest.fixture
def mock_aioclient():
    """Fixture to mock aioclient calls."""
    with aioresponses() as m:
        yield m
