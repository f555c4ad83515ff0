"""Payment aggregate: one record per processor transaction.

Payments are written once, when the processor confirms a checkout, and are
never updated or deleted. ``transaction_id`` carries a uniqueness
constraint so a second record for the same transaction is rejected by the
store even when two completions race past the duplicate lookup.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer, String

from readreach.domain import readreach
from readreach.payments.events import PaymentRecorded
from readreach.shared.email import normalize_email


@readreach.aggregate
class Payment:
    transaction_id = String(required=True, max_length=255, unique=True)
    session_id = String(max_length=255)
    order_id = Identifier()
    amount = Integer(min_value=0)  # minor units, as reported by the processor
    currency = String(max_length=3)
    book_name = String(max_length=255)
    email = String(max_length=254)
    payment_status = String(max_length=20)
    created_at = DateTime()

    @classmethod
    def record(
        cls,
        transaction_id,
        payment_status,
        session_id=None,
        order_id=None,
        amount=None,
        currency=None,
        book_name=None,
        email=None,
    ):
        now = datetime.now(UTC)
        payment = cls(
            transaction_id=transaction_id,
            session_id=session_id,
            order_id=order_id,
            amount=amount,
            currency=currency.lower() if currency else None,
            book_name=book_name,
            email=normalize_email(email) or None,
            payment_status=payment_status,
            created_at=now,
        )
        payment.raise_(
            PaymentRecorded(
                payment_id=payment.id,
                transaction_id=payment.transaction_id,
                order_id=payment.order_id,
                amount=payment.amount,
                currency=payment.currency,
                email=payment.email,
                payment_status=payment.payment_status,
                recorded_at=now,
            )
        )
        return payment
