import json
from datetime import datetime, timedelta

import httpx
import pytest

DOMAIN = "tenant.example.com"
BASE_URL = f"https://{DOMAIN}/api/v2"
TOKEN_URL = f"https://{DOMAIN}/oauth/token"


class FakeClock:
    """Controllable replacement for datetime.now."""

    def __init__(self):
        self.now = datetime(2026, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class Recorder:
    """MockTransport handler that records every request it serves."""

    def __init__(self, handler):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.handler(request)
        if hasattr(response, "__await__"):
            response = await response
        return response

    def to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


def token_response(request: httpx.Request, expires_in: int = 86400) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(
        200,
        json={
            "access_token": f"token-for-{body['client_id']}",
            "expires_in": expires_in,
            "token_type": "Bearer",
        },
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mock_http():
    """Build an AsyncClient whose transport is served by ``handler``."""

    def make(handler):
        recorder = Recorder(handler)
        client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        return recorder, client

    return make


@pytest.fixture
def static_options():
    return {
        "base_url": BASE_URL,
        "auth": {"token": "static-token"},
        "retry": {"enabled": False},
    }


@pytest.fixture
def credentials_options():
    return {
        "base_url": BASE_URL,
        "auth": {
            "domain": DOMAIN,
            "client_id": "cid",
            "client_secret": "secret",
        },
        "retry": {"enabled": True, "max_retries": 3, "base_delay": 0},
    }
