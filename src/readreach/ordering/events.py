"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from readreach.domain import readreach


@readreach.event(part_of="Order")
class OrderPlaced:
    """A purchaser placed an order for a book."""

    __version__ = 1

    order_id: Identifier(required=True)
    book_id: Identifier(required=True)
    email: String(required=True)
    librarian_email: String()
    price: Float(required=True)
    placed_at: DateTime(required=True)


@readreach.event(part_of="Order")
class OrderStatusChanged:
    """The order's fulfilment status moved along the transition table."""

    __version__ = 1

    order_id: Identifier(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)
    changed_by: String(required=True)
    changed_at: DateTime(required=True)


@readreach.event(part_of="Order")
class OrderPaid:
    """Payment for the order was confirmed by the processor."""

    __version__ = 1

    order_id: Identifier(required=True)
    transaction_id: String(required=True)
    paid_at: DateTime(required=True)
