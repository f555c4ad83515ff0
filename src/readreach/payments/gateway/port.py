"""Payment processor port.

Checkout is hosted by the processor: we open a session, redirect the
purchaser, and learn the result later from a signed webhook or by looking
the session up. Adapters translate processor responses into the frozen
result types below and processor failures into GatewayError.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

CHECKOUT_COMPLETED = "checkout.session.completed"
PAID = "paid"


class GatewayError(Exception):
    """The payment processor was unreachable or rejected the request."""


class InvalidWebhookError(Exception):
    """A webhook payload failed authenticity checks."""


class UnknownCheckoutError(Exception):
    """The processor has no checkout session with the given id."""


@dataclass(frozen=True)
class CheckoutSession:
    """A hosted checkout the purchaser is redirected to."""

    session_id: str
    url: str


@dataclass(frozen=True)
class CheckoutOutcome:
    """Processor-side state of a checkout session, as reported by the processor."""

    session_id: str
    transaction_id: str | None
    payment_status: str
    amount_total: int | None = None
    currency: str | None = None
    customer_email: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PAID


@dataclass(frozen=True)
class WebhookEvent:
    event_id: str
    event_type: str
    outcome: CheckoutOutcome | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
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
        """Open a hosted checkout for a single line item priced in minor units."""
        ...

    @abstractmethod
    def retrieve_checkout(self, session_id: str) -> CheckoutOutcome:
        """Fetch a checkout session from the processor's own records."""
        ...

    @abstractmethod
    def parse_webhook(self, payload: bytes, signature: str) -> WebhookEvent:
        """Verify a webhook signature and decode the event it carries."""
        ...
