"""Service settings read from the environment.

Persistence settings live in ``domain.toml`` (Protean); this module covers
the identity provider, the payment processor and the HTTP surface.
"""

import os
from dataclasses import dataclass, field

DEFAULT_CLIENT_DOMAIN = "http://localhost:5173"


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    firebase_project_id: str | None = None
    stripe_secret_key: str | None = None
    stripe_webhook_secret: str | None = None
    client_domain: str = DEFAULT_CLIENT_DOMAIN
    checkout_currency: str = "usd"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    port: int = 3000

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def checkout_success_url(self) -> str:
        # Stripe substitutes the session id into the literal placeholder
        return f"{self.client_domain}/dashboard/success?session_id={{CHECKOUT_SESSION_ID}}"

    @property
    def checkout_cancel_url(self) -> str:
        return f"{self.client_domain}/cancel"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            env=os.getenv("PROTEAN_ENV", "development").lower(),
            firebase_project_id=os.getenv("FIREBASE_PROJECT_ID") or None,
            stripe_secret_key=os.getenv("STRIPE_SECRET_KEY") or None,
            stripe_webhook_secret=os.getenv("STRIPE_WEBHOOK_SECRET") or None,
            client_domain=os.getenv("CLIENT_DOMAIN", DEFAULT_CLIENT_DOMAIN).rstrip("/"),
            checkout_currency=os.getenv("CHECKOUT_CURRENCY", "usd").lower(),
            cors_origins=_split_csv(os.getenv("CORS_ORIGINS", "*")),
            port=int(os.getenv("PORT", "3000")),
        )
