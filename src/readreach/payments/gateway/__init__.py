"""Payment gateway adapters.

``build_gateway()`` picks StripeGateway when credentials are configured and
FakeGateway otherwise. The application factory builds one gateway per
process and hands it to request handlers through ``app.state``.
"""

from readreach.payments.gateway.fake_adapter import FakeGateway
from readreach.payments.gateway.port import PaymentGateway
from readreach.payments.gateway.stripe_adapter import StripeGateway
from readreach.settings import Settings


def build_gateway(settings: Settings) -> PaymentGateway:
    if settings.stripe_secret_key:
        return StripeGateway(
            api_key=settings.stripe_secret_key,
            webhook_secret=settings.stripe_webhook_secret,
        )
    if settings.is_production:
        raise RuntimeError("STRIPE_SECRET_KEY must be set in production")
    return FakeGateway()


__all__ = ["FakeGateway", "PaymentGateway", "StripeGateway", "build_gateway"]
