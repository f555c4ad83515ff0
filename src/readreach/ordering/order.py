"""Order aggregate: purchase of a single book and its fulfilment lifecycle.

State machine (status):
    pending → processing → delivered
    pending → cancelled
    processing → cancelled

Payment (payment): unpaid → paid, driven only by a confirmed payment
completion. Confirmation moves a pending order to processing; an order that
is already cancelled or delivered is never reopened by a late payment.
Amounts are compared in minor units (``amount_due``).
"""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String, Text

from readreach.domain import readreach
from readreach.ordering.events import OrderPaid, OrderPlaced, OrderStatusChanged
from readreach.shared.email import normalize_email


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    CANCELLED = "cancelled"
    DELIVERED = "delivered"


class PaymentState(Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class StatusActor(Enum):
    PURCHASER = "purchaser"
    LIBRARIAN = "librarian"
    PAYMENT = "payment"


# State machine transition map, per actor
_VALID_TRANSITIONS = {
    StatusActor.PURCHASER: {
        OrderStatus.PENDING: {OrderStatus.CANCELLED},
        OrderStatus.PROCESSING: {OrderStatus.CANCELLED},
    },
    StatusActor.LIBRARIAN: {
        OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
        OrderStatus.PROCESSING: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    },
    StatusActor.PAYMENT: {
        OrderStatus.PENDING: {OrderStatus.PROCESSING},
    },
}

# Terminal states: nothing moves an order out of these
_CLOSED_STATES = {OrderStatus.CANCELLED, OrderStatus.DELIVERED}


def can_transition(actor: StatusActor, current: str, target: str) -> bool:
    allowed = _VALID_TRANSITIONS[actor].get(OrderStatus(current), set())
    return OrderStatus(target) in allowed


@readreach.aggregate
class Order:
    book_id = Identifier(required=True)
    book_name = String(max_length=255)
    email = String(required=True, max_length=254)
    customer_name = String(max_length=255)
    phone = String(max_length=30)
    address = Text()
    librarian_email = String(max_length=254)
    price = Float(required=True, min_value=0.0)
    status = String(max_length=20, choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment = String(max_length=20, choices=PaymentState, default=PaymentState.UNPAID.value)
    transaction_id = String(max_length=255)
    created_at = DateTime()

    @classmethod
    def place(cls, book_id, email, price, book_name=None, librarian_email=None, **contact):
        now = datetime.now(UTC)
        order = cls(
            book_id=book_id,
            book_name=book_name,
            email=normalize_email(email),
            librarian_email=normalize_email(librarian_email) or None,
            price=price,
            status=OrderStatus.PENDING.value,
            payment=PaymentState.UNPAID.value,
            created_at=now,
            **contact,
        )
        order.raise_(
            OrderPlaced(
                order_id=order.id,
                book_id=order.book_id,
                email=order.email,
                librarian_email=order.librarian_email,
                price=order.price,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def is_closed(self) -> bool:
        return OrderStatus(self.status) in _CLOSED_STATES

    def is_paid(self) -> bool:
        return self.payment == PaymentState.PAID.value

    def amount_due(self) -> int:
        """Price in minor units, truncated: 19.99 is 1999."""
        return int(Decimal(str(self.price)) * 100)

    def is_payable(self) -> bool:
        return not (self.is_closed() or self.is_paid())

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _transition(self, actor: StatusActor, target: OrderStatus) -> None:
        if not can_transition(actor, self.status, target.value):
            raise ValidationError(
                {"status": [f"Cannot move order from {self.status} to {target.value} as {actor.value}"]}
            )

        previous = self.status
        self.status = target.value
        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                previous_status=previous,
                new_status=target.value,
                changed_by=actor.value,
                changed_at=datetime.now(UTC),
            )
        )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def cancel(self) -> None:
        """Purchaser cancellation, allowed until the order is delivered."""
        self._transition(StatusActor.PURCHASER, OrderStatus.CANCELLED)

    def advance(self, status: str) -> None:
        """Librarian-driven status change, forward-only."""
        try:
            target = OrderStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status '{status}'"]}) from None

        self._transition(StatusActor.LIBRARIAN, target)

    def mark_paid(self, transaction_id: str) -> bool:
        """Apply a confirmed payment. Returns False when the order is left untouched."""
        if self.is_paid() or self.is_closed():
            return False

        now = datetime.now(UTC)
        self.payment = PaymentState.PAID.value
        self.transaction_id = transaction_id
        if self.status == OrderStatus.PENDING.value:
            self._transition(StatusActor.PAYMENT, OrderStatus.PROCESSING)

        self.raise_(
            OrderPaid(
                order_id=self.id,
                transaction_id=transaction_id,
                paid_at=now,
            )
        )
        return True
