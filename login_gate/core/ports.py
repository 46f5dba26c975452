"""
Port definitions (interfaces) for the core domain.

Ports define the contracts between the core domain and external systems.
Infrastructure adapters implement these ports.
"""

from typing import Any, Mapping, Protocol


class AuthorizationProvider(Protocol):
    """
    Port (interface) for an OAuth2 provider.

    Implemented by infrastructure adapters (e.g., AuthlibAuthorizationProvider).
    The URL and the state must be generated together: ``get_state`` returns
    the state embedded in the URL most recently returned by
    ``get_authorization_url``.
    """

    def get_authorization_url(self, options: Mapping[str, Any]) -> str:
        """
        Build the provider's authorization URL.

        Args:
            options: Provider-call options, passed through verbatim

        Returns:
            The authorization URL to redirect the user agent to
        """
        ...

    def get_state(self) -> str:
        """Return the state token embedded in the last authorization URL."""
        ...
