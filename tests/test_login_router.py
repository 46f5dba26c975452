"""
Tests for the OAuth2 login endpoint.
"""

from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient

from login_gate.main import app
from login_gate.oauth.config import get_oauth_config
from login_gate.oauth.dependencies import get_authorization_provider
from tests.conftest import AUTHORIZATION_URL, PROVIDER_STATE, read_session


# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def client(oauth_config):
    """Test client using the real authlib provider."""
    app.dependency_overrides[get_oauth_config] = lambda: oauth_config
    client = TestClient(app)
    yield client
    app.dependency_overrides.pop(get_oauth_config, None)


@pytest.fixture
def client_with_mock_provider(oauth_config, mock_provider):
    """Test client with a provider returning a fixed URL and state."""
    app.dependency_overrides[get_oauth_config] = lambda: oauth_config
    app.dependency_overrides[get_authorization_provider] = lambda: mock_provider
    client = TestClient(app)
    yield client
    app.dependency_overrides.pop(get_oauth_config, None)
    app.dependency_overrides.pop(get_authorization_provider, None)


def start_login(client: TestClient) -> str:
    """Visit the login endpoint and return the state sent to the provider."""
    response = client.get("/login/oauth2/google", follow_redirects=False)
    assert response.status_code == 303
    return parse_qs(urlparse(response.headers["location"]).query)["state"][0]


# ============================================================================
# Initial visit
# ============================================================================


class TestLoginStart:
    """Tests for the first visit to GET /login/oauth2/{provider}."""

    def test_redirects_to_provider(self, client):
        """Test the user agent is sent to the provider with See Other."""
        response = client.get("/login/oauth2/google", follow_redirects=False)

        assert response.status_code == 303
        location = response.headers["location"]
        assert location.startswith("https://accounts.google.com/o/oauth2/v2/auth?")
        query = parse_qs(urlparse(location).query)
        assert query["client_id"] == ["test-google-id"]
        assert query["redirect_uri"] == ["http://testserver/login/oauth2/google"]
        assert query["scope"] == ["openid email profile"]

    def test_saves_expected_state_in_session(self, client):
        """Test the session holds the state embedded in the redirect URL."""
        state = start_login(client)

        assert read_session(client) == {"expectedState": state}

    def test_uses_provider_url_and_state(self, client_with_mock_provider, mock_provider):
        """Test the redirect goes exactly where the provider says."""
        response = client_with_mock_provider.get(
            "/login/oauth2/google", follow_redirects=False
        )

        assert response.status_code == 303
        assert response.headers["location"] == AUTHORIZATION_URL
        assert read_session(client_with_mock_provider) == {"expectedState": PROVIDER_STATE}
        mock_provider.get_authorization_url.assert_called_once_with(
            {"scope": "openid email profile"}
        )

    def test_empty_parameters_start_login(self, client):
        """Test empty code and error values are treated as absent."""
        response = client.get(
            "/login/oauth2/google?code=&error=", follow_redirects=False
        )

        assert response.status_code == 303
        assert "expectedState" in read_session(client)

    def test_unknown_provider_returns_404(self, client):
        """Test unknown provider returns 404."""
        response = client.get("/login/oauth2/unknown", follow_redirects=False)

        assert response.status_code == 404

    def test_unconfigured_provider_returns_503(self, client):
        """Test provider without credentials returns 503."""
        response = client.get("/login/oauth2/adobe", follow_redirects=False)

        assert response.status_code == 503
        assert "not configured" in response.json()["detail"]


# ============================================================================
# Callback
# ============================================================================


class TestLoginCallback:
    """Tests for the provider's callback to GET /login/oauth2/{provider}."""

    def test_grant_redirects_to_success_url(self, client):
        """Test a valid callback is granted and the code kept in the session."""
        state = start_login(client)

        response = client.get(
            "/login/oauth2/google",
            params={"code": "xyz", "state": state},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard"
        assert read_session(client) == {"authorizationCode": "xyz"}

    def test_denied_returns_403(self, client):
        """Test a provider error with valid state is an access denial."""
        state = start_login(client)

        response = client.get(
            "/login/oauth2/google",
            params={"error": "access_denied", "state": state},
            follow_redirects=False,
        )

        assert response.status_code == 403
        data = response.json()
        assert data["status"] == "denied"
        assert data["code"] == "oauth2_denied"
        assert "expectedState" not in read_session(client)

    def test_state_mismatch_returns_400(self, client):
        """Test a forged state aborts the login and clears the saved state."""
        start_login(client)

        response = client.get(
            "/login/oauth2/google",
            params={"code": "xyz", "state": "wrong"},
            follow_redirects=False,
        )

        assert response.status_code == 400
        assert response.json() == {"status": "error", "message": "Invalid state"}
        assert read_session(client) == {}

    def test_retry_after_mismatch_is_rejected(self, client):
        """Test the saved state cannot be used after a failed comparison."""
        state = start_login(client)
        client.get(
            "/login/oauth2/google",
            params={"code": "xyz", "state": "wrong"},
            follow_redirects=False,
        )

        response = client.get(
            "/login/oauth2/google",
            params={"code": "xyz", "state": state},
            follow_redirects=False,
        )

        assert response.status_code == 400

    def test_mismatch_with_error_and_code_returns_400(self, client):
        """Test the state check precedes error and code handling."""
        start_login(client)

        response = client.get(
            "/login/oauth2/google",
            params={"code": "xyz", "error": "access_denied", "state": "wrong"},
            follow_redirects=False,
        )

        assert response.status_code == 400

    def test_callback_without_session_returns_400(self, client):
        """Test a callback with no login in progress is rejected."""
        response = client.get(
            "/login/oauth2/google",
            params={"code": "xyz", "state": "abc123"},
            follow_redirects=False,
        )

        assert response.status_code == 400

    def test_missing_state_returns_400(self, client):
        """Test a callback without state is rejected."""
        start_login(client)

        response = client.get(
            "/login/oauth2/google",
            params={"code": "xyz"},
            follow_redirects=False,
        )

        assert response.status_code == 400
        assert read_session(client) == {}

    def test_replayed_callback_returns_400(self, client):
        """Test a granted callback cannot be replayed."""
        state = start_login(client)
        params = {"code": "xyz", "state": state}
        client.get("/login/oauth2/google", params=params, follow_redirects=False)

        response = client.get(
            "/login/oauth2/google", params=params, follow_redirects=False
        )

        assert response.status_code == 400
