"""
OAuth 2.0 provider implementations.

Adapters from the authlib OAuth2 client to the AuthorizationProvider port.
Authlib builds the authorization URL and generates the state token; no
network call is made to build a URL.
"""

import logging
from typing import Any, Mapping

from authlib.integrations.httpx_client import OAuth2Client

from login_gate.core.exceptions import ProviderError, ProviderNotConfiguredError
from login_gate.oauth.config import OAuthConfig, PROVIDER_ENDPOINTS

logger = logging.getLogger(__name__)


class AuthlibAuthorizationProvider:
    """
    AuthorizationProvider backed by authlib's OAuth2 client.

    Remembers the state of the last URL it built, so use one instance per
    request.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str | None,
        authorize_url: str,
        redirect_uri: str,
        scope: str | None = None,
    ):
        self.authorize_url = authorize_url
        self.client = OAuth2Client(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
            scope=scope,
        )
        self._state: str | None = None

    def get_authorization_url(self, options: Mapping[str, Any]) -> str:
        try:
            url, state = self.client.create_authorization_url(
                self.authorize_url, **options
            )
        except Exception as e:
            raise ProviderError(f"Failed to build authorization URL: {e}") from e

        self._state = state
        return url

    def get_state(self) -> str:
        if self._state is None:
            raise ProviderError("No authorization URL has been built yet")
        return self._state


def create_authorization_provider(
    provider: str, config: OAuthConfig
) -> AuthlibAuthorizationProvider:
    """
    Create the authorization provider adapter for a provider name.

    Args:
        provider: OAuth provider name (google, adobe)
        config: OAuth configuration

    Returns:
        A fresh provider adapter

    Raises:
        ProviderNotConfiguredError: If the provider is unknown or has no credentials
    """
    if provider not in PROVIDER_ENDPOINTS:
        raise ProviderNotConfiguredError(f"Unknown provider: {provider}")
    if not config.is_provider_configured(provider):
        raise ProviderNotConfiguredError(f"Provider '{provider}' is not configured")

    client_id, client_secret = config.get_credentials(provider)
    logger.debug(f"Creating authorization provider for {provider}")

    return AuthlibAuthorizationProvider(
        client_id=client_id,
        client_secret=client_secret,
        authorize_url=PROVIDER_ENDPOINTS[provider].authorize_url,
        redirect_uri=config.get_callback_url(provider),
    )
