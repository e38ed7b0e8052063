"""Shared fixtures: fake clock, fake HTTP session and ready-made clients."""
import json
from unittest.mock import MagicMock

import pytest
import requests

from cex_sdk.exchange.api_manager import APIManager
from cex_sdk.exchange.gemini import GeminiClient
from cex_sdk.exchange.models import ExchangeConfig


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def make_response(payload=None, status_code=200, raw=None):
    """Build a fake requests.Response carrying a JSON payload or raw bytes."""
    response = MagicMock(spec=requests.Response)
    body = raw if raw is not None else json.dumps(payload).encode('utf-8')
    response.status_code = status_code
    response.content = body
    response.text = body.decode('utf-8', errors='replace')
    return response


@pytest.fixture
def clock():
    """Fake clock starting at t=1000."""
    return FakeClock()


@pytest.fixture
def response_factory():
    """Factory for fake responses."""
    return make_response


@pytest.fixture
def fake_session():
    """requests.Session double answering every call with an empty JSON list."""
    session = MagicMock(spec=requests.Session)
    session.request.return_value = make_response([])
    return session


@pytest.fixture
def api_manager(fake_session):
    """Transport routed through the fake session."""
    manager = APIManager(timeout=30.0)
    manager.set_http_client(fake_session)
    return manager


@pytest.fixture
def gemini_client(fake_session):
    """Gemini client with credentials, routed through the fake session."""
    return GeminiClient(ExchangeConfig(
        api_key='test-key',
        secret_key='test-secret',
        http_client=fake_session,
    ))


@pytest.fixture
def public_client(fake_session):
    """Gemini client without credentials."""
    return GeminiClient(ExchangeConfig(http_client=fake_session))


def sent_request(session, index=-1):
    """(method, url, kwargs) of a recorded session.request call."""
    call = session.request.call_args_list[index]
    method, url = call.args[:2]
    return method, url, call.kwargs
