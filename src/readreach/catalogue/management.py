"""Catalogue management commands and handler.

Removing a book also removes the orders that reference it. Both deletes run
in the handler's unit of work; on stores without multi-document
transactions this is a best-effort cleanup. Orders are deleted before the
book, so an interrupted removal leaves a book without orders rather than
orders pointing at a missing book.
"""

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from readreach.catalogue.book import Book, PublishStatus
from readreach.domain import readreach
from readreach.ordering.order import Order
from readreach.utils.logging import get_logger

logger = get_logger(__name__)


@readreach.command(part_of="Book")
class AddBook:
    title = String(required=True, max_length=255)
    author = String(max_length=255)
    image = String(max_length=2048)
    description = Text()
    category = String(max_length=100)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(default=1, min_value=0)
    librarian_email = String(required=True, max_length=254)
    librarian_name = String(max_length=255)
    published_status = String(max_length=20, default=PublishStatus.DRAFT.value)


@readreach.command(part_of="Book")
class UpdateBookDetails:
    book_id = Identifier(required=True)
    title = String(max_length=255)
    author = String(max_length=255)
    image = String(max_length=2048)
    description = Text()
    category = String(max_length=100)
    price = Float(min_value=0.0)
    quantity = Integer(min_value=0)


@readreach.command(part_of="Book")
class ChangePublishStatus:
    book_id = Identifier(required=True)
    published_status = String(required=True, max_length=20)


@readreach.command(part_of="Book")
class RemoveBook:
    book_id = Identifier(required=True)


@readreach.command_handler(part_of=Book)
class CatalogueHandler:
    @handle(AddBook)
    def add_book(self, command):
        book = Book.create(
            title=command.title,
            price=command.price,
            librarian_email=command.librarian_email,
            published_status=command.published_status,
            author=command.author,
            image=command.image,
            description=command.description,
            category=command.category,
            quantity=command.quantity,
            librarian_name=command.librarian_name,
        )
        current_domain.repository_for(Book).add(book)
        logger.info("book_added", book_id=str(book.id), librarian_email=book.librarian_email)
        return str(book.id)

    @handle(UpdateBookDetails)
    def update_book_details(self, command):
        repo = current_domain.repository_for(Book)
        book = repo.get(command.book_id)
        book.update_details(
            title=command.title,
            author=command.author,
            image=command.image,
            description=command.description,
            category=command.category,
            price=command.price,
            quantity=command.quantity,
        )
        repo.add(book)

    @handle(ChangePublishStatus)
    def change_publish_status(self, command):
        repo = current_domain.repository_for(Book)
        book = repo.get(command.book_id)
        book.set_publish_status(command.published_status)
        repo.add(book)

    @handle(RemoveBook)
    def remove_book(self, command):
        book_repo = current_domain.repository_for(Book)
        order_repo = current_domain.repository_for(Order)

        book = book_repo.get(command.book_id)

        orders = order_repo.find_by_book(str(book.id))
        for order in orders:
            order_repo.delete(order)
        book_repo.delete(book)

        logger.info("book_removed", book_id=str(book.id), orders_removed=len(orders))
        return len(orders)
