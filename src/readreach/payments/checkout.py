"""Checkout session initiation.

Opening a checkout is stateless: the processor hosts the payment page and
reports completion later, so nothing here touches Order or Payment records.
The price is validated and converted to minor units before the processor
is called.

A purchaser checkout always charges the stored order price. A price sent by
the client is only checked against it, and orders that are closed or
already paid cannot be checked out.
"""

from decimal import Decimal, InvalidOperation

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from readreach.ordering.order import Order
from readreach.payments.gateway.port import PaymentGateway
from readreach.settings import Settings
from readreach.utils.logging import get_logger

logger = get_logger(__name__)


def to_minor_units(price) -> int:
    """Convert a major-unit price to minor units, truncating: ``"19.99"`` is 1999."""
    try:
        amount = Decimal(str(price).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError({"price": [f"'{price}' is not a valid price"]}) from None

    if not amount.is_finite() or amount <= 0:
        raise ValidationError({"price": ["Price must be a positive amount"]})

    minor = int(amount * 100)
    if minor <= 0:
        raise ValidationError({"price": ["Price is below the smallest chargeable amount"]})
    return minor


def create_checkout_session(
    gateway: PaymentGateway,
    settings: Settings,
    order_name: str,
    email: str,
    price,
    order_id: str,
) -> str:
    """Open a hosted checkout for one order and return its redirect URL."""
    unit_amount = to_minor_units(price)

    session = gateway.create_checkout_session(
        product_name=order_name,
        unit_amount=unit_amount,
        currency=settings.checkout_currency,
        customer_email=email,
        metadata={"order_id": str(order_id), "book_name": order_name},
        success_url=settings.checkout_success_url,
        cancel_url=settings.checkout_cancel_url,
    )
    logger.info(
        "checkout_session_created",
        session_id=session.session_id,
        order_id=str(order_id),
        unit_amount=unit_amount,
    )
    return session.url


def open_order_checkout(
    gateway: PaymentGateway,
    settings: Settings,
    order_id: str,
    email: str,
    order_name: str | None = None,
    price=None,
) -> str:
    """Open a checkout for a stored order, charging the order's own price."""
    order = current_domain.repository_for(Order).get(order_id)

    if not order.is_payable():
        raise ValidationError(
            {"order_id": [f"Order is {order.status} and {order.payment}; it cannot be paid for"]}
        )

    if price is not None and to_minor_units(price) != order.amount_due():
        raise ValidationError({"price": ["Price does not match the order"]})

    return create_checkout_session(
        gateway,
        settings,
        order_name=order_name or order.book_name,
        email=email,
        price=order.price,
        order_id=str(order.id),
    )
