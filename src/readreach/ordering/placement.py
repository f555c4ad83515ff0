"""Order placement: command and handler.

Price, title and owning librarian are copied from the catalogue entry at
purchase time; the purchaser only supplies contact details.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from readreach.catalogue.book import Book
from readreach.domain import readreach
from readreach.ordering.order import Order
from readreach.utils.logging import get_logger

logger = get_logger(__name__)


@readreach.command(part_of="Order")
class PlaceOrder:
    book_id = Identifier(required=True)
    email = String(required=True, max_length=254)
    customer_name = String(max_length=255)
    phone = String(max_length=30)
    address = Text()


@readreach.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        book = current_domain.repository_for(Book).get(command.book_id)
        if not book.is_published():
            raise ValidationError({"book_id": ["Book is not available for purchase"]})

        order = Order.place(
            book_id=book.id,
            book_name=book.title,
            email=command.email,
            price=book.price,
            librarian_email=book.librarian_email,
            customer_name=command.customer_name,
            phone=command.phone,
            address=command.address,
        )
        current_domain.repository_for(Order).add(order)
        logger.info("order_placed", order_id=str(order.id), book_id=str(book.id), email=order.email)
        return str(order.id)
