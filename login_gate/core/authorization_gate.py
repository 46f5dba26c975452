"""
Login requirement: validation against an OAuth2 server.

Implements the front door of the Authorization Code flow. The gate decides,
for a single request, whether the login attempt is pending (the user agent
must first visit the provider), denied, or granted. It is independent of
HTTP: the caller passes in the query values and the session, and performs
the redirect itself when the result is ``Pending``.
"""

import hmac
import logging
from typing import Any, Mapping, MutableMapping

from login_gate.core.domain import (
    OUTPUT_AUTHORIZATION_CODE_KEY,
    SESSION_AUTHORIZATION_CODE_KEY,
    SESSION_EXPECTED_STATE_KEY,
    Denied,
    Granted,
    Pending,
    ValidationResult,
)
from login_gate.core.exceptions import GateAlreadyValidatedError, InvalidStateError
from login_gate.core.ports import AuthorizationProvider

logger = logging.getLogger(__name__)


def _opt_string(value: str | None) -> str | None:
    """Treat empty query values as absent."""
    if value is None or value == "":
        return None
    return value


def _states_match(given: str, expected: str) -> bool:
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


class AuthorizationGate:
    """
    One-shot OAuth2 authorization-code validation for a single request.
    """

    def __init__(
        self,
        provider: AuthorizationProvider,
        session: MutableMapping[str, Any],
        code: str | None = None,
        error: str | None = None,
        state: str | None = None,
        options: Mapping[str, Any] | None = None,
    ):
        """
        Initialize the gate.

        Args:
            provider: The OAuth2 provider
            session: Session store surviving the redirect round trip
            code: The authorization code from the callback, if any
            error: The error reported by the provider (authorization denied)
            state: The state echoed by the provider on the callback
            options: Options for AuthorizationProvider.get_authorization_url()
        """
        self._provider = provider
        self._session = session
        self._code = _opt_string(code)
        self._error = _opt_string(error)
        self._state = _opt_string(state)
        self._options = dict(options or {})
        self._validated = False

    def validate(self, data: MutableMapping[str, Any]) -> ValidationResult:
        """
        Validate the current request against the OAuth2 server.

        Guards are evaluated in order; the state check precedes the
        inspection of ``error`` and ``code``.

        Args:
            data: Output map for later login requirements. When login is
                granted it receives key ``oauth2code``: the authorization
                code provided by the OAuth2 server.

        Returns:
            Pending, Denied or Granted

        Raises:
            InvalidStateError: The state is missing or does not match the
                state saved before the redirect (possible CSRF attack)
            GateAlreadyValidatedError: validate() was already called
        """
        if self._validated:
            raise GateAlreadyValidatedError("validate() may only be called once per gate")
        self._validated = True

        if self._code is None and self._error is None:
            return self._prepare_redirect()

        self._check_state()

        if self._error is not None:
            logger.info(
                "OAuth2 authorization denied by provider",
                extra={"provider_error": self._error},
            )
            return Denied(error=self._error)

        # Preserve the code for later login requirements, possibly after another redirect.
        self._session[SESSION_AUTHORIZATION_CODE_KEY] = self._code
        data[OUTPUT_AUTHORIZATION_CODE_KEY] = self._code

        logger.info("OAuth2 authorization granted")
        return Granted(authorization_code=self._code)

    def _prepare_redirect(self) -> Pending:
        """No authorization code yet: fetch the authorization URL and save the state."""
        authorization_url = self._provider.get_authorization_url(self._options)
        self._session[SESSION_EXPECTED_STATE_KEY] = self._provider.get_state()

        logger.info("Redirecting user agent to OAuth2 authorization URL")
        return Pending(authorization_url=authorization_url)

    def _check_state(self) -> None:
        """
        Consume the saved state and compare it with the given state.

        The saved state is removed whatever the outcome, so one authorization
        round trip can be used at most once.
        """
        expected = self._session.pop(SESSION_EXPECTED_STATE_KEY, None)

        if self._state is None:
            reason = "missing_state"
        elif expected is None:
            reason = "no_saved_state"
        elif not _states_match(self._state, expected):
            reason = "state_mismatch"
        else:
            return

        logger.warning(
            "Invalid OAuth2 state (possible CSRF attack)",
            extra={"reason": reason},
        )
        raise InvalidStateError("Invalid state")
