"""Firebase Authentication ID token verifier.

Firebase ID tokens are RS256 JWTs signed with Google's rotating
securetoken keys. Verification follows Firebase's documented rules: the
signing key must come from the published JWKS, ``aud`` must be the project
id, ``iss`` must be ``https://securetoken.google.com/<project id>``, and
``sub`` must be a non-empty string.
"""

from datetime import UTC, datetime

import jwt
from jwt.exceptions import PyJWKClientConnectionError, PyJWKClientError

from readreach.auth.tokens import (
    IdentityProviderError,
    InvalidTokenError,
    TokenVerifier,
    VerifiedIdentity,
)
from readreach.shared.email import normalize_email
from readreach.utils.logging import get_logger

logger = get_logger(__name__)

FIREBASE_JWKS_URL = "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com"
FIREBASE_ISSUER_PREFIX = "https://securetoken.google.com/"
ALGORITHMS = ["RS256"]


def _timestamp(value) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=UTC)


class FirebaseTokenVerifier(TokenVerifier):
    """Verify Firebase ID tokens against Google's public keys."""

    def __init__(self, project_id: str, jwks_url: str = FIREBASE_JWKS_URL, leeway: int = 0) -> None:
        self.project_id = project_id
        self.issuer = f"{FIREBASE_ISSUER_PREFIX}{project_id}"
        self.leeway = leeway
        self._jwks = jwt.PyJWKClient(jwks_url, cache_keys=True)

    def verify_token(self, token: str) -> VerifiedIdentity:
        try:
            signing_key = self._jwks.get_signing_key_from_jwt(token)
        except PyJWKClientConnectionError as exc:
            logger.error("identity_provider_unreachable", error=str(exc))
            raise IdentityProviderError("Unable to fetch identity provider signing keys") from exc
        except (PyJWKClientError, jwt.DecodeError) as exc:
            raise InvalidTokenError(f"Token signing key not recognised: {exc}") from exc

        try:
            claims = jwt.decode(
                token,
                signing_key.key,
                algorithms=ALGORITHMS,
                audience=self.project_id,
                issuer=self.issuer,
                leeway=self.leeway,
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError(str(exc)) from exc

        subject = claims.get("sub")
        email = normalize_email(claims.get("email"))
        if not subject or not email:
            raise InvalidTokenError("Token is missing the subject or email claim")

        return VerifiedIdentity(
            subject=subject,
            email=email,
            issued_at=_timestamp(claims.get("iat")),
            expires_at=_timestamp(claims.get("exp")),
            claims=claims,
        )
