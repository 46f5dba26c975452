"""
Core domain models for the OAuth2 authorization step.

A validation produces exactly one of the result models below. Each result
carries an ``outcome`` tag so callers can dispatch on it without isinstance
chains or string matching.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


# Session keys shared with later login requirements.
SESSION_EXPECTED_STATE_KEY = "expectedState"
SESSION_AUTHORIZATION_CODE_KEY = "authorizationCode"

# Key under which the authorization code is handed to later pipeline stages.
OUTPUT_AUTHORIZATION_CODE_KEY = "oauth2code"


class LoginRequirementCode(str, Enum):
    """Result codes reported by a login requirement."""

    GRANTED = "granted"
    OAUTH2_DENIED = "oauth2_denied"


class ValidationOutcome(str, Enum):
    """Tag of a validation result."""

    PENDING = "pending"
    DENIED = "denied"
    GRANTED = "granted"


class Pending(BaseModel):
    """
    No decision yet: the user agent must be sent to the provider.

    The caller is required to redirect (303 See Other) to
    ``authorization_url`` and stop handling the current request.
    """

    model_config = ConfigDict(frozen=True)

    outcome: Literal[ValidationOutcome.PENDING] = ValidationOutcome.PENDING
    authorization_url: str = Field(description="Provider authorization URL")


class Denied(BaseModel):
    """The provider reported an error or the user refused consent."""

    model_config = ConfigDict(frozen=True)

    outcome: Literal[ValidationOutcome.DENIED] = ValidationOutcome.DENIED
    code: LoginRequirementCode = LoginRequirementCode.OAUTH2_DENIED
    error: str = Field(description="Error value reported by the provider")


class Granted(BaseModel):
    """Login is granted by this requirement."""

    model_config = ConfigDict(frozen=True)

    outcome: Literal[ValidationOutcome.GRANTED] = ValidationOutcome.GRANTED
    code: LoginRequirementCode = LoginRequirementCode.GRANTED
    authorization_code: str = Field(
        repr=False, description="Authorization code issued by the provider"
    )


ValidationResult = Pending | Denied | Granted
