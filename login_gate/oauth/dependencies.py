"""
FastAPI dependencies for the OAuth2 login endpoint.

Provides dependency injection for provider validation and for building the
authorization gate from the current request.
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Query, Request, status

from login_gate.core.authorization_gate import AuthorizationGate
from login_gate.core.ports import AuthorizationProvider
from login_gate.infrastructure.oauth_providers import create_authorization_provider
from login_gate.oauth.config import (
    get_oauth_config,
    OAuthConfig,
    SUPPORTED_PROVIDERS,
)


logger = logging.getLogger(__name__)


async def validate_provider(
    provider: str,
    config: Annotated[OAuthConfig, Depends(get_oauth_config)],
) -> str:
    """
    Validate that the provider is supported and configured.

    Args:
        provider: OAuth provider name from path
        config: OAuth configuration

    Returns:
        Validated provider name

    Raises:
        HTTPException: If provider is invalid or not configured
    """
    if provider not in SUPPORTED_PROVIDERS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown provider: {provider}. Supported: {SUPPORTED_PROVIDERS}",
        )

    if not config.is_provider_configured(provider):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Provider '{provider}' is not configured",
        )

    return provider


ValidProvider = Annotated[str, Depends(validate_provider)]
Config = Annotated[OAuthConfig, Depends(get_oauth_config)]


def get_authorization_provider(
    provider: ValidProvider,
    config: Config,
) -> AuthorizationProvider:
    """Provide a fresh authorization provider for this request."""
    return create_authorization_provider(provider, config)


def get_authorization_gate(
    request: Request,
    provider: ValidProvider,
    config: Config,
    authorization_provider: Annotated[
        AuthorizationProvider, Depends(get_authorization_provider)
    ],
    code: Annotated[str | None, Query()] = None,
    error: Annotated[str | None, Query()] = None,
    state: Annotated[str | None, Query()] = None,
) -> AuthorizationGate:
    """
    Build the authorization gate for the current request.

    Query values and the session are passed explicitly to the gate.
    """
    return AuthorizationGate(
        provider=authorization_provider,
        session=request.session,
        code=code,
        error=error,
        state=state,
        options=config.get_authorization_options(provider),
    )


Gate = Annotated[AuthorizationGate, Depends(get_authorization_gate)]
