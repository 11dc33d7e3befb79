"""Pytest configuration and fixtures."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from client import AirbrakeClient, RawResponse, Session
from config import reset_config


class FakeHTTP:
    """
    Stand-in for aiohttp.ClientSession.

    Queued responses (or exceptions) are consumed in order; every request is
    recorded in ``calls``.
    """

    def __init__(self):
        self.responses = []
        self.calls = []

    def add(self, status, body=None):
        if body is not None and not isinstance(body, bytes):
            body = json.dumps(body).encode()
        self.responses.append((status, body or b""))

    def fail(self, error):
        self.responses.append(error)

    def session_factory(self, *args, **kwargs):
        session = MagicMock()
        session.request = MagicMock(side_effect=self._request)
        return AsyncMock(
            __aenter__=AsyncMock(return_value=session),
            __aexit__=AsyncMock(return_value=False),
        )

    def _request(self, method, url, params=None, json=None, headers=None):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "params": params,
                "json": json,
                "headers": headers,
            }
        )
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item

        status, body = item
        resp = MagicMock()
        resp.status = status
        resp.read = AsyncMock(return_value=body)
        return AsyncMock(
            __aenter__=AsyncMock(return_value=resp),
            __aexit__=AsyncMock(return_value=False),
        )


@pytest.fixture(autouse=True)
def fresh_config():
    """Reload configuration from the environment in every test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def fake_http():
    """Patch aiohttp.ClientSession in the client module."""
    fake = FakeHTTP()
    with patch("client.aiohttp.ClientSession", side_effect=fake.session_factory):
        yield fake


@pytest.fixture
def session():
    return Session("https://api.example.test/api/v4/", "secret-key")


@pytest.fixture
def client(session):
    return AirbrakeClient(session, timeout=5)


@pytest.fixture
def mock_client():
    """Create a mock AirbrakeClient."""
    client = AsyncMock()
    client.list = AsyncMock(return_value=RawResponse(status=200, body=b'{"projects": []}'))
    client.create = AsyncMock()
    client.update = AsyncMock(return_value=RawResponse(status=200))
    client.remove = AsyncMock(return_value=RawResponse(status=204))
    return client


@pytest.fixture
def listing_response():
    """Build a successful projects listing response from records."""

    def build(*records):
        return RawResponse(
            status=200, body=json.dumps({"projects": list(records)}).encode()
        )

    return build


@pytest.fixture
def sample_project_record():
    """Sample project record as returned by the Airbrake API."""
    return {
        "id": 42,
        "name": "foo",
        "created_at": "2023-01-05T10:00:00.000Z",
        "updated_at": "2023-01-05T10:00:00.000Z",
        "account_id": 7,
        "api_key": "abcdef0123456789",
        "resolve_errors_on_deploy": True,
        "severity_threshold": {"level": "error"},
        "language": "ruby",
        "retention_period_days": 30,
        "notifier_name": "airbrake-ruby",
        "anomaly_notification_environments": ["production"],
        "server_error_alert_threshold": 10,
        "is_first_project": False,
        "some_future_field": "ignored",
    }
