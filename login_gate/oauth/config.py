"""
OAuth2 configuration for the login gate.

Loaded from environment variables. Each provider (Google, Adobe) can be
configured independently; providers without credentials are reported as
not configured.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderEndpoints:
    """Static authorization endpoint and scope of a provider."""

    authorize_url: str
    scope: str


PROVIDER_ENDPOINTS: dict[str, ProviderEndpoints] = {
    "google": ProviderEndpoints(
        authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
        scope="openid email profile",
    ),
    "adobe": ProviderEndpoints(
        authorize_url="https://ims-na1.adobelogin.com/ims/authorize/v2",
        scope="openid email profile",
    ),
}

# List of supported providers (for validation)
SUPPORTED_PROVIDERS = list(PROVIDER_ENDPOINTS)


@dataclass
class OAuthConfig:
    """
    OAuth configuration settings.

    Loaded from environment variables.
    """

    base_url: str
    google_client_id: str | None
    google_client_secret: str | None

    adobe_client_id: str | None = None
    adobe_client_secret: str | None = None

    login_success_url: str = "/dashboard"

    @classmethod
    def from_env(cls) -> "OAuthConfig":
        """Load configuration from environment variables."""
        return cls(
            base_url=os.getenv("BASE_URL", ""),
            google_client_id=os.getenv("GOOGLE_CLIENT_ID"),
            google_client_secret=os.getenv("GOOGLE_CLIENT_SECRET"),
            adobe_client_id=os.getenv("ADOBE_CLIENT_ID"),
            adobe_client_secret=os.getenv("ADOBE_CLIENT_SECRET"),
            login_success_url=os.getenv("LOGIN_SUCCESS_URL", "/dashboard"),
        )

    def get_callback_url(self, provider: str) -> str:
        """
        Generate callback URL for a provider.

        The login endpoint serves both the initial visit and the callback.
        """
        return f"{self.base_url}/login/oauth2/{provider}"

    def get_credentials(self, provider: str) -> tuple[str | None, str | None]:
        """Return (client_id, client_secret) for a provider."""
        if provider == "google":
            return self.google_client_id, self.google_client_secret
        if provider == "adobe":
            return self.adobe_client_id, self.adobe_client_secret
        return None, None

    def is_provider_configured(self, provider: str) -> bool:
        """Check if a provider has valid credentials configured."""
        client_id, client_secret = self.get_credentials(provider)
        return bool(client_id and client_secret)

    def get_configured_providers(self) -> list[str]:
        """List all providers with valid configuration."""
        return [p for p in SUPPORTED_PROVIDERS if self.is_provider_configured(p)]

    def get_authorization_options(self, provider: str) -> dict[str, Any]:
        """Options passed verbatim to the provider when building the authorization URL."""
        return {"scope": PROVIDER_ENDPOINTS[provider].scope}


@lru_cache()
def get_oauth_config() -> OAuthConfig:
    """Get OAuth configuration singleton."""
    config = OAuthConfig.from_env()
    configured = config.get_configured_providers()
    if configured:
        logger.info(f"OAuth2 login providers configured: {', '.join(configured)}")
    else:
        logger.warning("No OAuth2 login provider configured (missing credentials)")
    return config
