"""
Domain exceptions for the login gate.

These exceptions represent failures of the authorization step and are caught
by centralized exception handlers in main.py. Denials and pending redirects
are not exceptions: they are regular validation results (see domain.py).
"""


class LoginGateError(Exception):
    """Base exception for login gate errors."""

    pass


class SecurityError(LoginGateError):
    """
    Raised when a request looks forged or replayed.

    Must abort the login pipeline. Never convert it into a denial.
    """

    pass


class InvalidStateError(SecurityError):
    """
    Raised when the OAuth2 state token is missing or does not match.

    The expected state has already been removed from the session when
    this is raised.
    """

    pass


class GateAlreadyValidatedError(LoginGateError):
    """Raised when validate() is called a second time on the same gate."""

    pass


class ProviderError(LoginGateError):
    """Raised when the OAuth2 provider adapter cannot build an authorization URL."""

    pass


class ProviderNotConfiguredError(ProviderError):
    """Raised for an unknown provider or one without credentials."""

    pass
