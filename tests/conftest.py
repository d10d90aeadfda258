"""Shared fixtures for endpointmonitor tests."""

from __future__ import annotations

import pytest
import respx
from pydantic import SecretStr

import endpointmonitor
from endpointmonitor import ConnectionConfig


BASE_URL = "http://test-api.endpointmonitor.local"
API_KEY = "epm_test_key"


@pytest.fixture()
def config():
    return ConnectionConfig(url=BASE_URL, key=SecretStr(API_KEY))


@pytest.fixture()
def mock_api():
    """Activate a respx mock router scoped to the test API base URL."""
    with respx.mock(base_url=BASE_URL) as router:
        yield router


@pytest.fixture()
def client(config):
    """Create a sync client pointed at the test base URL."""
    c = endpointmonitor.Client(config)
    yield c
    c.close()


@pytest.fixture()
def async_client(config):
    """Create an async client pointed at the test base URL."""
    return endpointmonitor.AsyncClient(config)
