"""
Pytest configuration and shared fixtures for the Okta policy client tests.

Scenario tests run against an in-process fake Okta by default. Set
OKTA_INTEGRATION=1 (with OKTA_CLIENT_ORGURL and OKTA_API_TOKEN) to run them
against a real org instead.
"""

import os
import uuid
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestServer

from okta_policy_client.config.settings import Settings, get_settings
from okta_policy_client.core.okta.client import OktaClient

from tests.fake_okta import FAKE_TOKEN, FakeOkta

DEFAULT_PREFIX = "py-sdk:"


def _truthy_env(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


INTEGRATION = _truthy_env("OKTA_INTEGRATION")


@pytest.fixture
def offline_settings() -> Settings:
    """Settings for tests that never reach the network."""
    return Settings(OKTA_CLIENT_ORGURL="https://example.okta.com", OKTA_API_TOKEN="offline-token")


@pytest.fixture
def fake_okta() -> FakeOkta:
    """Fresh fake org state for each test."""
    return FakeOkta()


@pytest_asyncio.fixture
async def okta_server(fake_okta: FakeOkta) -> AsyncGenerator[TestServer, None]:
    """Serve the fake org over HTTP on a free local port."""
    server = TestServer(fake_okta.build_app())
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture
def fake_settings(okta_server: TestServer) -> Settings:
    return Settings(
        OKTA_CLIENT_ORGURL=str(okta_server.make_url("/")),
        OKTA_API_TOKEN=FAKE_TOKEN,
        OKTA_REQUEST_TIMEOUT=10,
        TEST_RESOURCE_PREFIX=DEFAULT_PREFIX,
    )


@pytest.fixture
def fake_client(fake_settings: Settings) -> OktaClient:
    """Client that always talks to the fake org."""
    return OktaClient(fake_settings)


@pytest.fixture
def client(fake_settings: Settings) -> OktaClient:
    """Client for scenario tests: a real org when OKTA_INTEGRATION is set, otherwise the fake."""
    if INTEGRATION:
        return OktaClient(get_settings())
    return OktaClient(fake_settings)


@pytest.fixture
def unique_name(client: OktaClient) -> Callable[[str], str]:
    """Build a unique resource name; Okta caps names at 50 characters."""
    prefix = client.settings.TEST_RESOURCE_PREFIX

    def _make(label: str) -> str:
        return f"{prefix} {label} {uuid.uuid4()}"[:50]

    return _make
