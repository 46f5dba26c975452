"""
Shared test configuration and fixtures.
"""

import base64
import json
import os
from unittest.mock import MagicMock, patch

import pytest
from itsdangerous import TimestampSigner

SESSION_SECRET_KEY = "test-secret"

# Set environment variables before importing app
with patch.dict(
    os.environ,
    {
        "SESSION_SECRET_KEY": SESSION_SECRET_KEY,
        "BASE_URL": "http://testserver",
    },
):
    from login_gate.main import app  # noqa: F401

from login_gate.core.ports import AuthorizationProvider
from login_gate.oauth.config import OAuthConfig


AUTHORIZATION_URL = "https://provider.example.com/authorize?state=provider-state-123"
PROVIDER_STATE = "provider-state-123"


@pytest.fixture
def mock_provider():
    """Mock authorization provider returning a fixed URL and state."""
    provider = MagicMock(spec=AuthorizationProvider)
    provider.get_authorization_url.return_value = AUTHORIZATION_URL
    provider.get_state.return_value = PROVIDER_STATE
    return provider


@pytest.fixture
def oauth_config():
    """OAuth config with Google configured and Adobe left unconfigured."""
    return OAuthConfig(
        base_url="http://testserver",
        google_client_id="test-google-id",
        google_client_secret="test-google-secret",
        login_success_url="/dashboard",
    )


def read_session(client) -> dict:
    """Decode the signed Starlette session cookie held by a TestClient."""
    cookie = client.cookies.get("session")
    if cookie is None:
        return {}
    payload = TimestampSigner(SESSION_SECRET_KEY).unsign(cookie.encode("utf-8"))
    return json.loads(base64.b64decode(payload))
