"""Bearer token verification and access control.

``build_verifier()`` picks FirebaseTokenVerifier when a Firebase project is
configured and FakeTokenVerifier otherwise.
"""

from readreach.auth.fake_adapter import FakeTokenVerifier
from readreach.auth.firebase_adapter import FirebaseTokenVerifier
from readreach.auth.tokens import TokenVerifier
from readreach.settings import Settings


def build_verifier(settings: Settings) -> TokenVerifier:
    if settings.firebase_project_id:
        return FirebaseTokenVerifier(project_id=settings.firebase_project_id)
    if settings.is_production:
        raise RuntimeError("FIREBASE_PROJECT_ID must be set in production")
    return FakeTokenVerifier()


__all__ = ["FakeTokenVerifier", "FirebaseTokenVerifier", "TokenVerifier", "build_verifier"]
