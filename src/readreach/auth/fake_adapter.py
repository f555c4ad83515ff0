"""In-memory token verifier for development and testing.

Issues opaque tokens bound to an email address and verifies them without
any network call. Tokens can be expired or revoked to exercise the
rejection path, and every verification is recorded in ``calls``.
"""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

from readreach.auth.tokens import (
    IdentityProviderError,
    InvalidTokenError,
    TokenVerifier,
    VerifiedIdentity,
)
from readreach.shared.email import normalize_email


class FakeTokenVerifier(TokenVerifier):
    """Configurable fake identity provider."""

    def __init__(self) -> None:
        self._identities: dict[str, VerifiedIdentity] = {}
        self._revoked: set[str] = set()
        self.available: bool = True
        self.calls: list[str] = []

    def issue(self, email: str, ttl: timedelta = timedelta(hours=1)) -> str:
        """Mint a token for ``email`` valid for ``ttl``."""
        now = datetime.now(UTC)
        token = f"fake-{uuid4().hex}"
        self._identities[token] = VerifiedIdentity(
            subject=f"uid-{uuid4().hex[:12]}",
            email=normalize_email(email),
            issued_at=now,
            expires_at=now + ttl,
            claims={"email": normalize_email(email), "email_verified": True},
        )
        return token

    def revoke(self, token: str) -> None:
        self._revoked.add(token)

    def verify_token(self, token: str) -> VerifiedIdentity:
        self.calls.append(token)

        if not self.available:
            raise IdentityProviderError("Fake identity provider is unavailable")

        identity = self._identities.get(token)
        if identity is None or token in self._revoked:
            raise InvalidTokenError("Unknown or revoked token")
        if identity.expires_at is not None and identity.expires_at <= datetime.now(UTC):
            raise InvalidTokenError("Token has expired")

        return identity
