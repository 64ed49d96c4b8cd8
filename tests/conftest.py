import asyncio
import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from servios.auth import InMemoryTokenStore

FRESH_TOKEN = "fresh-token"


def pytest_configure(config):
    # Register the asyncio marker so pytest doesn't warn when it's used.
    config.addinivalue_line(
        "markers", "asyncio: mark test to run in an asyncio event loop"
    )


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Keep tests independent of the developer's SERVIOS_* environment."""
    for key in (
        "SERVIOS_BASE_URL",
        "SERVIOS_TIMEOUT",
        "SERVIOS_USE_MOCK",
        "SERVIOS_MOCK_DELAY",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("SERVIOS_LOG_LEVEL", "INFO")
    yield


class FakeApi:
    """httpx.MockTransport handler standing in for a bearer-protected API.

    Requests without ``Authorization: Bearer <valid_token>`` get
    ``unauthorized_status``. Authorized requests get the route registered for
    ``(method, path)`` or, by default, an echo of the request.
    """

    def __init__(
        self, valid_token: Optional[str] = FRESH_TOKEN, unauthorized_status: int = 401
    ):
        self.valid_token = valid_token
        self.unauthorized_status = unauthorized_status
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], Tuple[int, Any]] = {}

    def route(self, method: str, path: str, status: int, payload: Any = None):
        self.routes[(method.upper(), path)] = (status, payload)

    def authorized(self, request: httpx.Request) -> bool:
        if self.valid_token is None:
            return True
        return request.headers.get("authorization") == f"Bearer {self.valid_token}"

    def bearer_tokens(self) -> List[Optional[str]]:
        return [r.headers.get("authorization") for r in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.authorized(request):
            return httpx.Response(
                self.unauthorized_status, json={"message": "Unauthorized"}
            )
        key = (request.method, request.url.path)
        if key in self.routes:
            status, payload = self.routes[key]
            if payload is None:
                return httpx.Response(status)
            return httpx.Response(status, json=payload)
        return httpx.Response(
            200,
            json={
                "method": request.method,
                "path": request.url.path,
                "params": dict(request.url.params),
                "body": json.loads(request.content) if request.content else None,
            },
        )


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def transport(fake_api):
    return httpx.MockTransport(fake_api)


@pytest.fixture
def token_store():
    return InMemoryTokenStore(access_token=FRESH_TOKEN, refresh_token="refresh-1")


@pytest.fixture
def wait_until():
    """Return a coroutine function yielding to the loop until a condition holds."""

    async def _wait_until(predicate, max_iterations: int = 1000):
        for _ in range(max_iterations):
            if predicate():
                return
            await asyncio.sleep(0)
        raise AssertionError("condition not reached")

    return _wait_until
