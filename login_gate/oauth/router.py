"""
OAuth2 login API endpoint.

- GET /login/oauth2/{provider} - Start the authorization flow, or handle the
  provider's callback (same URL, distinguished by the query parameters)
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse, RedirectResponse

from login_gate.core.domain import ValidationOutcome
from login_gate.oauth.dependencies import Config, Gate, ValidProvider


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/login/oauth2", tags=["login"])


@router.get("/{provider}")
async def login(
    provider: ValidProvider,
    gate: Gate,
    config: Config,
):
    """
    Validate the login attempt against the OAuth2 provider.

    Without ``code`` or ``error`` the user agent is redirected to the
    provider's authorization page. On the callback the state is verified and
    the attempt is denied or granted.

    Args:
        provider: OAuth provider name (google, adobe)
        gate: Authorization gate built from the query parameters and session
        config: OAuth configuration

    Returns:
        303 redirect to the provider (pending), 403 (denied) or
        303 redirect to the success URL (granted)

    Raises:
        InvalidStateError: On a missing or mismatched state (handled in main.py)
    """
    data: dict = {}
    result = gate.validate(data)

    if result.outcome == ValidationOutcome.PENDING:
        logger.info(
            f"Starting OAuth2 login for provider: {provider}",
            extra={"provider": provider},
        )
        return RedirectResponse(
            url=result.authorization_url,
            status_code=status.HTTP_303_SEE_OTHER,
        )

    if result.outcome == ValidationOutcome.DENIED:
        logger.info(
            f"OAuth2 login denied for provider: {provider}",
            extra={"provider": provider},
        )
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={
                "status": "denied",
                "code": result.code.value,
                "message": "Access denied by the OAuth2 provider",
            },
        )

    logger.info(
        f"OAuth2 login granted for provider: {provider}",
        extra={"provider": provider},
    )
    return RedirectResponse(
        url=config.login_success_url,
        status_code=status.HTTP_303_SEE_OTHER,
    )
