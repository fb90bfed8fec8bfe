"""Pytest configuration and shared fixtures."""

import json
import os
from unittest.mock import MagicMock, patch

import pytest
from hypothesis import settings

from ghc.api.client import Client

# Configure Hypothesis profiles for different environments
settings.register_profile("ci", max_examples=100, deadline=None)
settings.register_profile("dev", max_examples=50, deadline=None)
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "hypothesis: marks property-based tests using Hypothesis",
    )


def _build_response(
    status_code: int = 200,
    json_data=None,
    text: str | None = None,
    headers: dict[str, str] | None = None,
    content: bytes | None = None,
    url: str = "https://api.github.com/",
) -> MagicMock:
    """Build a mock requests.Response.

    The body is `text` if given, otherwise `json_data` serialized as JSON,
    otherwise empty. response.json() parses the body like requests does.
    """
    if text is None:
        text = json.dumps(json_data) if json_data is not None else ""

    response = MagicMock()
    response.status_code = status_code
    response.reason = "OK" if status_code < 400 else "Error"
    response.text = text
    response.content = content if content is not None else text.encode()
    response.headers = headers or {}
    response.url = url
    response.json.side_effect = lambda: json.loads(text)
    return response


@pytest.fixture
def make_response():
    """Fixture providing a factory for mock requests.Response objects."""
    return _build_response


@pytest.fixture
def mock_session():
    """Fixture providing a mock requests.Session."""
    return MagicMock()


@pytest.fixture
def client(mock_session):
    """Fixture providing a github.com Client with a token and a mock session."""
    return Client(mock_session, "github.com", "ghp_testtoken123")


@pytest.fixture
def mock_sleep():
    """Fixture that patches the retry backoff sleep."""
    with patch("ghc.api.client.time.sleep") as sleep:
        yield sleep
