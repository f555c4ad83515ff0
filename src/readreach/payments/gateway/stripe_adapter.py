"""Stripe Checkout payment gateway adapter."""

from typing import Any

import stripe

from readreach.payments.gateway.port import (
    CHECKOUT_COMPLETED,
    CheckoutOutcome,
    CheckoutSession,
    GatewayError,
    InvalidWebhookError,
    PaymentGateway,
    UnknownCheckoutError,
    WebhookEvent,
)
from readreach.utils.logging import get_logger

logger = get_logger(__name__)


def _get(obj: Any, key: str, default: Any = None) -> Any:
    if obj is None:
        return default
    try:
        return obj[key]
    except (KeyError, TypeError, AttributeError):
        return getattr(obj, key, default)


def _as_dict(obj: Any) -> dict[str, str]:
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return {str(k): str(v) for k, v in obj.items()}
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return {str(k): str(v) for k, v in to_dict().items()}
    return {}


def _outcome(session: Any) -> CheckoutOutcome:
    return CheckoutOutcome(
        session_id=_get(session, "id"),
        transaction_id=_get(session, "payment_intent"),
        payment_status=_get(session, "payment_status") or "unpaid",
        amount_total=_get(session, "amount_total"),
        currency=_get(session, "currency"),
        customer_email=_get(session, "customer_email"),
        metadata=_as_dict(_get(session, "metadata")),
    )


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str, webhook_secret: str | None) -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    def create_checkout_session(
        self,
        product_name: str,
        unit_amount: int,
        currency: str,
        customer_email: str,
        metadata: dict[str, str],
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.create(
                api_key=self.api_key,
                payment_method_types=["card"],
                line_items=[
                    {
                        "price_data": {
                            "currency": currency,
                            "product_data": {"name": product_name},
                            "unit_amount": unit_amount,
                        },
                        "quantity": 1,
                    }
                ],
                mode="payment",
                customer_email=customer_email,
                metadata=metadata,
                success_url=success_url,
                cancel_url=cancel_url,
            )
        except stripe.StripeError as exc:
            logger.error("stripe_checkout_failed", error=str(exc))
            raise GatewayError("Unable to create checkout session") from exc

        return CheckoutSession(session_id=session.id, url=session.url)

    def retrieve_checkout(self, session_id: str) -> CheckoutOutcome:
        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=self.api_key)
        except stripe.InvalidRequestError as exc:
            raise UnknownCheckoutError(f"Unknown checkout session {session_id}") from exc
        except stripe.StripeError as exc:
            logger.error("stripe_retrieve_failed", session_id=session_id, error=str(exc))
            raise GatewayError("Unable to retrieve checkout session") from exc

        return _outcome(session)

    def parse_webhook(self, payload: bytes, signature: str) -> WebhookEvent:
        if not self.webhook_secret:
            raise InvalidWebhookError("Webhook secret is not configured")

        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as exc:
            raise InvalidWebhookError("Invalid Stripe webhook signature") from exc

        event_type = _get(event, "type")
        outcome = None
        if event_type == CHECKOUT_COMPLETED:
            outcome = _outcome(_get(_get(event, "data"), "object"))

        return WebhookEvent(event_id=_get(event, "id"), event_type=event_type, outcome=outcome)
