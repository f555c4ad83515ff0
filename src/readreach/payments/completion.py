"""Payment completion: command and handler.

A completion arrives from the processor, either through the signed webhook
or through a retrieve-by-id lookup, and is keyed by the processor's
transaction id. Recording is idempotent:

1. A Payment already stored for the transaction means a duplicate
   notification; nothing changes.
2. Otherwise the Payment is inserted.
3. When the processor reports the checkout as paid and the amount charged
   equals the order's ``amount_due``, the referenced Order is marked paid.
   ``Order.mark_paid`` leaves cancelled and delivered orders untouched, so
   a late completion never reopens them. A mismatched amount is recorded
   as a Payment but leaves the order unpaid.

Two completions for one transaction can race past step 1. The store's
uniqueness constraint on ``transaction_id`` rejects the second insert, its
unit of work is rolled back, and ``complete_payment`` treats the rejection
as an already-handled duplicate.

The Payment and the Order are written in the same unit of work on purpose,
so Protean's "Multiple aggregate types modified in a single UnitOfWork"
warning is expected for paid completions.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from readreach.domain import readreach
from readreach.ordering.order import Order
from readreach.payments.gateway.port import PAID, CheckoutOutcome
from readreach.payments.payment import Payment
from readreach.utils.logging import get_logger

logger = get_logger(__name__)


@readreach.command(part_of="Payment")
class RecordPaymentCompletion:
    transaction_id = String(required=True, max_length=255)
    payment_status = String(required=True, max_length=20)
    session_id = String(max_length=255)
    order_id = Identifier()
    amount = Integer(min_value=0)
    currency = String(max_length=3)
    book_name = String(max_length=255)
    email = String(max_length=254)


@readreach.command_handler(part_of=Payment)
class PaymentCompletionHandler:
    @handle(RecordPaymentCompletion)
    def record_completion(self, command):
        payment_repo = current_domain.repository_for(Payment)

        if payment_repo.find_by_transaction_id(command.transaction_id) is not None:
            logger.info("payment_duplicate_ignored", transaction_id=command.transaction_id)
            return False

        payment = Payment.record(
            transaction_id=command.transaction_id,
            payment_status=command.payment_status,
            session_id=command.session_id,
            order_id=command.order_id,
            amount=command.amount,
            currency=command.currency,
            book_name=command.book_name,
            email=command.email,
        )
        payment_repo.add(payment)
        logger.info(
            "payment_recorded",
            transaction_id=payment.transaction_id,
            order_id=payment.order_id,
            amount=payment.amount,
        )

        if command.payment_status == PAID and command.order_id:
            self._mark_order_paid(command.order_id, command.transaction_id, command.amount)

        return True

    def _mark_order_paid(self, order_id, transaction_id, amount):
        order_repo = current_domain.repository_for(Order)
        try:
            order = order_repo.get(order_id)
        except ObjectNotFoundError:
            logger.warning("payment_order_missing", order_id=order_id, transaction_id=transaction_id)
            return

        if amount != order.amount_due():
            logger.warning(
                "payment_amount_mismatch",
                order_id=order_id,
                transaction_id=transaction_id,
                amount=amount,
                amount_due=order.amount_due(),
            )
            return

        if order.mark_paid(transaction_id):
            order_repo.add(order)
            logger.info("order_marked_paid", order_id=order_id, transaction_id=transaction_id)
        else:
            logger.info(
                "order_left_unchanged",
                order_id=order_id,
                status=order.status,
                payment=order.payment,
            )


def is_duplicate_transaction(exc: ValidationError) -> bool:
    return "transaction_id" in (exc.messages or {})


def completion_from_checkout(outcome: CheckoutOutcome) -> RecordPaymentCompletion:
    metadata = outcome.metadata or {}
    return RecordPaymentCompletion(
        transaction_id=outcome.transaction_id or outcome.session_id,
        payment_status=outcome.payment_status,
        session_id=outcome.session_id,
        order_id=metadata.get("order_id") or None,
        amount=outcome.amount_total,
        currency=outcome.currency,
        book_name=metadata.get("book_name"),
        email=outcome.customer_email,
    )


def complete_payment(outcome: CheckoutOutcome) -> bool:
    """Record a processor-confirmed checkout. Returns False for a duplicate."""
    command = completion_from_checkout(outcome)
    try:
        return current_domain.process(command, asynchronous=False)
    except ValidationError as exc:
        if not is_duplicate_transaction(exc):
            raise
        logger.info("payment_duplicate_raced", transaction_id=command.transaction_id)
        return False
