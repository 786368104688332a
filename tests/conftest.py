"""
Shared test fixtures for Bitpin SDK tests.

Provides common fixtures for HTTP mocking, configuration,
and test token generation.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable, Iterator
from typing import Any

import httpx
import jwt
import pytest

from bitpin_sdk.client import BitpinClient
from bitpin_sdk.config import BitpinConfig

SIGNING_SECRET = "test-signing-secret-of-at-least-32-bytes"
BASE_URL = "https://api.bitpin.test"

Handler = Callable[[httpx.Request], httpx.Response]


def make_token(expires_in: int = 3600, **claims: Any) -> str:
    """Create a signed JWT expiring ``expires_in`` seconds from now."""
    payload: dict[str, Any] = {
        "token_type": "access",
        "exp": int(time.time()) + expires_in,
        "jti": "c0ffee",
        "user_id": 42,
        "ip": ["127.0.0.1"],
        "api_credential_id": 7,
    }
    payload.update(claims)
    return jwt.encode(payload, SIGNING_SECRET, algorithm="HS256")


class MockAPI:
    """Route table behind an ``httpx.MockTransport`` that records requests."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        *,
        status: int = 200,
        json_body: Any = None,
        content: bytes | None = None,
        handler: Handler | None = None,
    ) -> None:
        """Register a canned response for ``method`` on ``/api/v1<path>``."""
        if handler is None:
            body = content if content is not None else json.dumps(json_body).encode()

            def handler(request: httpx.Request) -> httpx.Response:
                return httpx.Response(status, content=body)

        self.routes[(method, f"/api/v1{path}")] = handler

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path == f"/api/v1{path}"
        ]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"detail": "Not found."})
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture
def mock_api() -> MockAPI:
    """Provide an empty mock Bitpin API."""
    return MockAPI()


@pytest.fixture
def base_config() -> BitpinConfig:
    """Provide a configuration without credentials."""
    return BitpinConfig(base_url=BASE_URL)


@pytest.fixture
def token_factory() -> Callable[..., str]:
    """Provide the JWT factory."""
    return make_token


@pytest.fixture
def access_token() -> str:
    return make_token(3600)


@pytest.fixture
def refresh_token() -> str:
    return make_token(7 * 24 * 3600, token_type="refresh")


@pytest.fixture
def authed_config(access_token: str, refresh_token: str) -> BitpinConfig:
    """Provide a configuration holding a valid token pair."""
    return BitpinConfig(
        base_url=BASE_URL,
        access_token=access_token,
        refresh_token=refresh_token,
    )


@pytest.fixture
def make_client(mock_api: MockAPI) -> Iterator[Callable[[BitpinConfig], BitpinClient]]:
    """Build clients wired to the mock API, closing them after the test."""
    clients: list[BitpinClient] = []

    def factory(config: BitpinConfig) -> BitpinClient:
        client = BitpinClient(config, transport=mock_api.transport)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()


@pytest.fixture
def sample_order() -> dict[str, Any]:
    """Provide a sample order status payload."""
    return {
        "id": 1001,
        "symbol": "BTC_USDT",
        "type": "limit",
        "side": "buy",
        "base_amount": "0.01",
        "quote_amount": None,
        "price": "60000",
        "stop_price": None,
        "oco_target_price": None,
        "identifier": "my-order-1",
        "state": "active",
        "created_at": "2024-05-01T10:00:00Z",
        "closed_at": None,
        "dealed_base_amount": "0",
        "dealed_quote_amount": "0",
        "req_to_cancel": False,
        "commission": "0",
    }
