"""Domain events for the Payment aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from readreach.domain import readreach


@readreach.event(part_of="Payment")
class PaymentRecorded:
    """A processor-confirmed checkout was recorded against an order."""

    __version__ = 1

    payment_id: Identifier(required=True)
    transaction_id: String(required=True)
    order_id: Identifier()
    amount: Integer()
    currency: String()
    email: String()
    payment_status: String(required=True)
    recorded_at: DateTime(required=True)
