"""Shared BDD fixtures and step definitions for the Order lifecycle."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from readreach.ordering.events import OrderPaid, OrderPlaced, OrderStatusChanged
from readreach.ordering.order import Order

_ORDER_EVENT_CLASSES = {
    "OrderPlaced": OrderPlaced,
    "OrderStatusChanged": OrderStatusChanged,
    "OrderPaid": OrderPaid,
}


@pytest.fixture()
def outcome():
    """Collects the result of the When step."""
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a pending order", target_fixture="order")
def _pending_order():
    order = Order.place(
        book_id="book-001",
        email="reader@example.com",
        price=19.99,
        book_name="Dune",
        librarian_email="librarian@example.com",
    )
    order._events.clear()
    return order


@given(parsers.cfparse('the librarian has set the status to "{status}"'), target_fixture="order")
def _advanced_order(order, status):
    order.advance(status)
    order._events.clear()
    return order


@given("the purchaser has cancelled the order", target_fixture="order")
def _cancelled_order(order):
    order.cancel()
    order._events.clear()
    return order


@given(parsers.cfparse('the payment "{transaction_id}" has been confirmed'), target_fixture="order")
def _paid_order(order, transaction_id):
    order.mark_paid(transaction_id)
    order._events.clear()
    return order


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _order_status(order, status):
    assert order.status == status


@then(parsers.cfparse('the order payment is "{payment}"'))
def _order_payment(order, payment):
    assert order.payment == payment


@then(parsers.cfparse('the order transaction is "{transaction_id}"'))
def _order_transaction(order, transaction_id):
    assert order.transaction_id == transaction_id


@then("the order action fails with a validation error")
def _action_failed(outcome):
    assert isinstance(outcome.get("error"), ValidationError)


@then(parsers.cfparse("an {event_type} order event is raised"))
def _order_event_raised(order, event_type):
    event_cls = _ORDER_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in order._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in order._events]}"
