"""Bearer token verification port.

Defines the verified identity produced for every authenticated request, the
failure taxonomy, and the contract identity-provider adapters implement.
Swapping FirebaseTokenVerifier (production) for FakeTokenVerifier (tests,
local development) changes nothing downstream.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

BEARER_SCHEME = "bearer"


class AuthenticationError(Exception):
    """Base class for token verification failures."""


class MissingCredentialsError(AuthenticationError):
    """No Authorization header, or not of the form ``Bearer <token>``."""


class InvalidTokenError(AuthenticationError):
    """A well-formed token that failed signature or claims verification."""


class IdentityProviderError(Exception):
    """The identity provider could not be reached or answered with an error."""


@dataclass(frozen=True)
class VerifiedIdentity:
    """Caller identity established from a verified token. Lives for one request."""

    subject: str
    email: str
    issued_at: datetime | None = None
    expires_at: datetime | None = None
    claims: dict[str, Any] = field(default_factory=dict)


class TokenVerifier(ABC):
    """Abstract identity provider interface."""

    @abstractmethod
    def verify_token(self, token: str) -> VerifiedIdentity:
        """Verify a raw bearer token.

        Raises InvalidTokenError when the token is rejected and
        IdentityProviderError when the provider cannot be consulted.
        """
        ...


def extract_bearer_token(header_value: str | None) -> str:
    """Pull the token out of an ``Authorization`` header value."""
    if not header_value:
        raise MissingCredentialsError("Authorization header is missing")

    parts = header_value.split()
    if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME:
        raise MissingCredentialsError("Authorization header must use the Bearer scheme")

    return parts[1]


def verify(header_value: str | None, verifier: TokenVerifier) -> VerifiedIdentity:
    """Validate an inbound ``Authorization`` header.

    The header is parsed before the verifier is consulted, so a missing or
    malformed credential never reaches the identity provider.
    """
    token = extract_bearer_token(header_value)
    return verifier.verify_token(token)
