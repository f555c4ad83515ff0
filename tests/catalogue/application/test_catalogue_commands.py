"""Application tests for catalogue management commands."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from readreach.catalogue.book import Book
from readreach.catalogue.management import ChangePublishStatus, RemoveBook, UpdateBookDetails
from readreach.ordering.order import Order


class TestAddBook:
    def test_add_book_persists(self, make_book):
        book_id = make_book(title="Neuromancer", published_status="draft")

        book = current_domain.repository_for(Book).get(book_id)
        assert book.title == "Neuromancer"
        assert book.librarian_email == "librarian@example.com"
        assert book.librarian_name == "Libby"
        assert book.published_status == "draft"


class TestUpdateBook:
    def test_update_details(self, make_book):
        book_id = make_book()

        current_domain.process(UpdateBookDetails(book_id=book_id, price=9.5, quantity=7), asynchronous=False)

        book = current_domain.repository_for(Book).get(book_id)
        assert book.price == 9.5
        assert book.quantity == 7
        assert book.title == "Dune"

    def test_update_missing_book(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdateBookDetails(book_id="missing", title="x"), asynchronous=False)

    def test_change_publish_status(self, make_book):
        book_id = make_book(published_status="draft")

        current_domain.process(
            ChangePublishStatus(book_id=book_id, published_status="published"),
            asynchronous=False,
        )

        assert current_domain.repository_for(Book).get(book_id).is_published()

    def test_change_publish_status_to_unknown_value(self, make_book):
        book_id = make_book(published_status="draft")
        with pytest.raises(ValidationError):
            current_domain.process(
                ChangePublishStatus(book_id=book_id, published_status="hidden"),
                asynchronous=False,
            )


class TestRemoveBook:
    def test_remove_book_removes_its_orders(self, make_book, make_order):
        book_id = make_book()
        other_book_id = make_book(title="Hyperion")
        make_order(email="a@example.com", book_id=book_id)
        make_order(email="b@example.com", book_id=book_id)
        kept_order_id = make_order(email="a@example.com", book_id=other_book_id)

        removed = current_domain.process(RemoveBook(book_id=book_id), asynchronous=False)

        assert removed == 2
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Book).get(book_id)

        orders = current_domain.repository_for(Order).find_all()
        assert [str(o.id) for o in orders] == [kept_order_id]

    def test_remove_missing_book(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(RemoveBook(book_id="missing"), asynchronous=False)


class TestCatalogueQueries:
    def test_published_only(self, make_book):
        make_book(title="Draft", published_status="draft")
        make_book(title="Live")

        titles = [b.title for b in current_domain.repository_for(Book).find_published()]
        assert titles == ["Live"]

    def test_latest_is_newest_first_and_limited(self, make_book):
        for index in range(6):
            make_book(title=f"Book {index}")

        titles = [b.title for b in current_domain.repository_for(Book).find_latest(4)]
        assert titles == ["Book 5", "Book 4", "Book 3", "Book 2"]

    def test_by_librarian(self, make_book):
        make_book(librarian_email="one@example.com", title="One")
        make_book(librarian_email="two@example.com", title="Two")

        titles = [b.title for b in current_domain.repository_for(Book).find_by_librarian("ONE@example.com")]
        assert titles == ["One"]
