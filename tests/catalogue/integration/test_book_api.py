"""Integration tests for the catalogue endpoints."""

from protean import current_domain
from readreach.catalogue.book import Book
from readreach.ordering.order import Order


class TestPublicCatalogue:
    def test_all_books_lists_published_only(self, client, make_book):
        make_book(title="Draft", published_status="draft")
        make_book(title="Live")

        response = client.get("/all-books")
        assert response.status_code == 200
        assert [b["title"] for b in response.json()] == ["Live"]

    def test_latest_book(self, client, make_book):
        for index in range(5):
            make_book(title=f"Book {index}")

        response = client.get("/latest-book")
        assert response.status_code == 200
        assert len(response.json()) == 4

    def test_book_by_id(self, client, make_book):
        book_id = make_book()
        response = client.get(f"/bookById/{book_id}")
        assert response.status_code == 200
        data = response.json()
        assert data["_id"] == book_id
        assert data["title"] == "Dune"

    def test_book_by_id_missing(self, client):
        response = client.get("/bookById/missing")
        assert response.status_code == 200
        assert response.json() is None


class TestLibrarianBooks:
    def test_add_book_is_owned_by_caller(self, client, login):
        headers = login("librarian@example.com", role="librarian", name="Libby")
        response = client.post(
            "/add-book",
            json={
                "title": "Snow Crash",
                "price": 14.0,
                "librarian_email": "someone-else@example.com",
                "published_status": "published",
            },
            headers=headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["librarian_email"] == "librarian@example.com"
        assert data["librarian_name"] == "Libby"

    def test_user_cannot_add_book(self, client, login):
        headers = login("reader@example.com")
        response = client.post("/add-book", json={"title": "Nope", "price": 1.0}, headers=headers)
        assert response.status_code == 403
        assert current_domain.repository_for(Book).find_all() == []

    def test_librarian_lists_own_books(self, client, login, make_book):
        make_book(librarian_email="librarian@example.com", title="Mine")
        make_book(librarian_email="other@example.com", title="Theirs")
        headers = login("librarian@example.com", role="librarian")

        response = client.get("/librarian-book", params={"email": "librarian@example.com"}, headers=headers)
        assert response.status_code == 200
        assert [b["title"] for b in response.json()] == ["Mine"]

    def test_librarian_cannot_list_another_librarians_books(self, client, login):
        headers = login("librarian@example.com", role="librarian")
        response = client.get("/librarian-book", params={"email": "other@example.com"}, headers=headers)
        assert response.status_code == 403

    def test_update_own_book(self, client, login, make_book):
        book_id = make_book(librarian_email="librarian@example.com")
        headers = login("librarian@example.com", role="librarian")

        response = client.patch(f"/book-update/{book_id}", json={"price": 11.25}, headers=headers)
        assert response.status_code == 200
        assert current_domain.repository_for(Book).get(book_id).price == 11.25

    def test_cannot_update_another_librarians_book(self, client, login, make_book):
        book_id = make_book(librarian_email="other@example.com")
        headers = login("librarian@example.com", role="librarian")

        response = client.patch(f"/book-update/{book_id}", json={"price": 0.5}, headers=headers)
        assert response.status_code == 403
        assert current_domain.repository_for(Book).get(book_id).price == 19.99


class TestPublishStatusEndpoint:
    def test_librarian_publishes_own_book(self, client, login, make_book):
        book_id = make_book(published_status="draft")
        headers = login("librarian@example.com", role="librarian")

        response = client.patch(
            f"/publish-status-update/{book_id}",
            json={"published_status": "published"},
            headers=headers,
        )
        assert response.status_code == 200
        assert current_domain.repository_for(Book).get(book_id).is_published()

    def test_admin_unpublishes_any_book(self, client, login, make_book):
        book_id = make_book(librarian_email="other@example.com")
        headers = login("admin@example.com", role="admin")

        response = client.patch(
            f"/publish-status-update/{book_id}",
            json={"publishedStatus": "draft"},
            headers=headers,
        )
        assert response.status_code == 200
        assert not current_domain.repository_for(Book).get(book_id).is_published()

    def test_librarian_cannot_publish_another_librarians_book(self, client, login, make_book):
        book_id = make_book(librarian_email="other@example.com", published_status="draft")
        headers = login("librarian@example.com", role="librarian")

        response = client.patch(
            f"/publish-status-update/{book_id}",
            json={"published_status": "published"},
            headers=headers,
        )
        assert response.status_code == 403
        assert not current_domain.repository_for(Book).get(book_id).is_published()


class TestAdminBooks:
    def test_admin_lists_every_book(self, client, login, make_book):
        make_book(title="Draft", published_status="draft")
        make_book(title="Live")
        headers = login("admin@example.com", role="admin")

        response = client.get("/books", headers=headers)
        assert response.status_code == 200
        assert {b["title"] for b in response.json()} == {"Draft", "Live"}

    def test_delete_book_removes_orders(self, client, login, make_book, make_order):
        book_id = make_book()
        make_order(book_id=book_id)
        headers = login("admin@example.com", role="admin")

        response = client.delete(f"/delete-book/{book_id}", headers=headers)
        assert response.status_code == 200
        assert response.json() == {"deleted": True, "orders_removed": 1}
        assert current_domain.repository_for(Book).find_all() == []
        assert current_domain.repository_for(Order).find_all() == []

    def test_librarian_cannot_delete(self, client, login, make_book):
        book_id = make_book(librarian_email="librarian@example.com")
        headers = login("librarian@example.com", role="librarian")

        response = client.delete(f"/delete-book/{book_id}", headers=headers)
        assert response.status_code == 403
        assert current_domain.repository_for(Book).get(book_id) is not None

    def test_delete_missing_book(self, client, login):
        headers = login("admin@example.com", role="admin")
        response = client.delete("/delete-book/missing", headers=headers)
        assert response.status_code == 404
