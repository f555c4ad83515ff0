"""Integration tests for request authentication and authorization."""

from protean import current_domain
from readreach.catalogue.book import Book
from readreach.identity.user import User


class TestAuthentication:
    def test_missing_header_is_unauthorized(self, client, verifier):
        response = client.get("/orders")

        assert response.status_code == 401
        assert verifier.calls == []

    def test_non_bearer_scheme_is_unauthorized(self, client, verifier):
        response = client.get("/orders", headers={"Authorization": "Token abc"})

        assert response.status_code == 401
        assert verifier.calls == []

    def test_rejected_token_is_forbidden(self, client):
        response = client.get("/orders", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 403

    def test_verified_but_unregistered_is_unauthorized(self, client, verifier):
        headers = {"Authorization": f"Bearer {verifier.issue('stranger@example.com')}"}
        response = client.get("/orders", headers=headers)
        assert response.status_code == 401

    def test_registration_needs_only_a_verified_token(self, client, verifier):
        headers = {"Authorization": f"Bearer {verifier.issue('newcomer@example.com')}"}

        response = client.post("/users", json={"name": "New Comer"}, headers=headers)

        assert response.status_code == 200
        assert response.json()["created"] is True
        assert current_domain.repository_for(User).find_by_email("newcomer@example.com") is not None

    def test_identity_provider_outage_is_a_server_error(self, client, verifier, login):
        headers = login("reader@example.com")
        verifier.available = False

        response = client.get("/orders", headers=headers)

        assert response.status_code == 500


class TestAuthorization:
    def test_wrong_role_is_forbidden_without_side_effects(self, client, login, make_book):
        book_id = make_book()
        headers = login("reader@example.com")

        response = client.delete(f"/delete-book/{book_id}", headers=headers)

        assert response.status_code == 403
        assert current_domain.repository_for(Book).get(book_id).title == "Dune"

    def test_librarian_cannot_edit_another_librarians_book(self, client, login, make_book):
        book_id = make_book(librarian_email="owner@example.com")
        headers = login("intruder@example.com", role="librarian")

        response = client.patch(f"/book-update/{book_id}", json={"title": "Changed"}, headers=headers)

        assert response.status_code == 403
        assert current_domain.repository_for(Book).get(book_id).title == "Dune"

    def test_role_change_applies_on_next_request(self, client, login):
        reader = login("reader@example.com")
        admin = login("admin@example.com", role="admin")

        assert client.get("/all-orders", headers=reader).status_code == 403

        response = client.patch(
            "/update-user-role",
            params={"email": "reader@example.com"},
            json={"roleOfUser": "admin"},
            headers=admin,
        )
        assert response.status_code == 200

        assert client.get("/all-orders", headers=reader).status_code == 200

    def test_admin_reads_any_user(self, client, login):
        login("reader@example.com")
        admin = login("admin@example.com", role="admin")

        response = client.get("/user", params={"email": "reader@example.com"}, headers=admin)

        assert response.status_code == 200
        assert response.json()["email"] == "reader@example.com"

    def test_user_cannot_read_another_user(self, client, login):
        login("other@example.com")
        response = client.get("/user", params={"email": "other@example.com"}, headers=login("reader@example.com"))
        assert response.status_code == 403


class TestServiceEndpoints:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "running" in response.text

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok", "domain": "readreach"}
