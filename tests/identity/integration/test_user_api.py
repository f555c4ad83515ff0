"""Integration tests for the user endpoints."""

from protean import current_domain
from readreach.identity.user import User


class TestRegisterEndpoint:
    def test_first_sign_in_creates_user(self, client, verifier):
        token = verifier.issue("new@example.com")
        response = client.post(
            "/users",
            json={"name": "New Reader", "photoURL": "https://img.example.com/me.png"},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["created"] is True
        assert data["user"]["email"] == "new@example.com"
        assert data["user"]["role"] == "user"
        assert data["user"]["photo_url"] == "https://img.example.com/me.png"
        assert "_id" in data["user"]

    def test_second_sign_in_returns_existing(self, client, verifier):
        headers = {"Authorization": f"Bearer {verifier.issue('new@example.com')}"}
        first = client.post("/users", json={"name": "New Reader"}, headers=headers).json()
        second = client.post("/users", json={"name": "Renamed"}, headers=headers).json()

        assert second["created"] is False
        assert second["message"] == "User already exists"
        assert second["user"]["_id"] == first["user"]["_id"]
        assert len(current_domain.repository_for(User).find_all()) == 1

    def test_body_cannot_choose_role_or_email(self, client, verifier):
        headers = {"Authorization": f"Bearer {verifier.issue('new@example.com')}"}
        response = client.post(
            "/users",
            json={"email": "admin@example.com", "role": "admin"},
            headers=headers,
        )
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["email"] == "new@example.com"
        assert user["role"] == "user"
        assert current_domain.repository_for(User).find_by_email("admin@example.com") is None

    def test_requires_token(self, client):
        response = client.post("/users", json={"name": "Anonymous"})
        assert response.status_code == 401


class TestUserLookup:
    def test_user_reads_self(self, client, login):
        headers = login("reader@example.com")
        response = client.get("/user", params={"email": "reader@example.com"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["email"] == "reader@example.com"

    def test_user_without_email_param_reads_self(self, client, login):
        headers = login("reader@example.com")
        response = client.get("/user", headers=headers)
        assert response.status_code == 200
        assert response.json()["email"] == "reader@example.com"

    def test_user_cannot_read_someone_else(self, client, login):
        login("other@example.com")
        headers = login("reader@example.com")
        response = client.get("/user", params={"email": "other@example.com"}, headers=headers)
        assert response.status_code == 403

    def test_admin_reads_anyone(self, client, login):
        login("other@example.com")
        headers = login("admin@example.com", role="admin")
        response = client.get("/user", params={"email": "other@example.com"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["email"] == "other@example.com"

    def test_admin_lookup_of_missing_user(self, client, login):
        headers = login("admin@example.com", role="admin")
        response = client.get("/user", params={"email": "ghost@example.com"}, headers=headers)
        assert response.status_code == 404


class TestUserAdministration:
    def test_admin_lists_users(self, client, login):
        login("reader@example.com")
        headers = login("admin@example.com", role="admin")
        response = client.get("/users", headers=headers)
        assert response.status_code == 200
        assert {u["email"] for u in response.json()} == {"reader@example.com", "admin@example.com"}

    def test_non_admin_cannot_list_users(self, client, login):
        headers = login("reader@example.com")
        assert client.get("/users", headers=headers).status_code == 403

    def test_fetch_users_by_role(self, client, login):
        login("reader@example.com")
        login("librarian@example.com", role="librarian")
        headers = login("admin@example.com", role="admin")
        response = client.get("/fetch-role-based-user", params={"role": "librarian"}, headers=headers)
        assert response.status_code == 200
        assert [u["email"] for u in response.json()] == ["librarian@example.com"]

    def test_admin_changes_role(self, client, login):
        login("reader@example.com")
        headers = login("admin@example.com", role="admin")
        response = client.patch(
            "/update-user-role",
            params={"email": "reader@example.com"},
            json={"roleOfUser": "librarian"},
            headers=headers,
        )
        assert response.status_code == 200
        assert current_domain.repository_for(User).find_by_email("reader@example.com").role == "librarian"

    def test_invalid_role_is_rejected(self, client, login):
        login("reader@example.com")
        headers = login("admin@example.com", role="admin")
        response = client.patch(
            "/update-user-role",
            params={"email": "reader@example.com"},
            json={"role": "owner"},
            headers=headers,
        )
        assert response.status_code == 400

    def test_user_cannot_promote_self(self, client, login):
        headers = login("reader@example.com")
        response = client.patch(
            "/update-user-role",
            params={"email": "reader@example.com"},
            json={"role": "admin"},
            headers=headers,
        )
        assert response.status_code == 403
        assert current_domain.repository_for(User).find_by_email("reader@example.com").role == "user"
