"""Configurable fake payment gateway for development and testing.

This adapter simulates Stripe Checkout without any external calls. Sessions
are kept in memory; ``complete()`` plays the part of the purchaser paying,
and ``webhook_payload()`` builds the event body the processor would post.
Webhooks are accepted only with the ``test-signature`` signature.
"""

import json
from uuid import uuid4

from readreach.payments.gateway.port import (
    CHECKOUT_COMPLETED,
    PAID,
    CheckoutOutcome,
    CheckoutSession,
    GatewayError,
    InvalidWebhookError,
    PaymentGateway,
    UnknownCheckoutError,
    WebhookEvent,
)

TEST_SIGNATURE = "test-signature"


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Processor unavailable"
        self.calls: list[dict] = []
        self.sessions: dict[str, CheckoutOutcome] = {}

    def configure(self, should_succeed: bool, failure_reason: str = "Processor unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

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
        self.calls.append(
            {
                "method": "create_checkout_session",
                "product_name": product_name,
                "unit_amount": unit_amount,
                "currency": currency,
                "customer_email": customer_email,
                "metadata": dict(metadata),
                "success_url": success_url,
                "cancel_url": cancel_url,
            }
        )
        if not self.should_succeed:
            raise GatewayError(self.failure_reason)

        session_id = f"cs_test_{uuid4().hex[:16]}"
        self.sessions[session_id] = CheckoutOutcome(
            session_id=session_id,
            transaction_id=None,
            payment_status="unpaid",
            amount_total=unit_amount,
            currency=currency,
            customer_email=customer_email,
            metadata=dict(metadata),
        )
        return CheckoutSession(session_id=session_id, url=f"https://checkout.fake/pay/{session_id}")

    def complete(self, session_id: str, payment_status: str = PAID, transaction_id: str | None = None) -> CheckoutOutcome:
        """Simulate the purchaser finishing checkout."""
        session = self.sessions[session_id]
        completed = CheckoutOutcome(
            session_id=session.session_id,
            transaction_id=transaction_id or f"pi_test_{uuid4().hex[:16]}",
            payment_status=payment_status,
            amount_total=session.amount_total,
            currency=session.currency,
            customer_email=session.customer_email,
            metadata=session.metadata,
        )
        self.sessions[session_id] = completed
        return completed

    def retrieve_checkout(self, session_id: str) -> CheckoutOutcome:
        self.calls.append({"method": "retrieve_checkout", "session_id": session_id})
        if not self.should_succeed:
            raise GatewayError(self.failure_reason)
        if session_id not in self.sessions:
            raise UnknownCheckoutError(f"Unknown checkout session {session_id}")
        return self.sessions[session_id]

    def webhook_payload(self, session_id: str, event_type: str = CHECKOUT_COMPLETED) -> bytes:
        session = self.sessions[session_id]
        return json.dumps(
            {
                "id": f"evt_test_{uuid4().hex[:16]}",
                "type": event_type,
                "data": {
                    "object": {
                        "id": session.session_id,
                        "payment_intent": session.transaction_id,
                        "payment_status": session.payment_status,
                        "amount_total": session.amount_total,
                        "currency": session.currency,
                        "customer_email": session.customer_email,
                        "metadata": session.metadata,
                    }
                },
            }
        ).encode()

    def parse_webhook(self, payload: bytes, signature: str) -> WebhookEvent:
        if signature != TEST_SIGNATURE:
            raise InvalidWebhookError("Invalid webhook signature")

        try:
            event = json.loads(payload)
        except ValueError as exc:
            raise InvalidWebhookError("Malformed webhook payload") from exc

        outcome = None
        if event.get("type") == CHECKOUT_COMPLETED:
            obj = event["data"]["object"]
            outcome = CheckoutOutcome(
                session_id=obj["id"],
                transaction_id=obj.get("payment_intent"),
                payment_status=obj.get("payment_status") or "unpaid",
                amount_total=obj.get("amount_total"),
                currency=obj.get("currency"),
                customer_email=obj.get("customer_email"),
                metadata=obj.get("metadata") or {},
            )

        return WebhookEvent(event_id=event.get("id", ""), event_type=event.get("type", ""), outcome=outcome)
