"""Repository for the User aggregate."""

from readreach.domain import readreach
from readreach.identity.user import User
from readreach.shared.email import normalize_email

QUERY_LIMIT = 1000


@readreach.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email: str) -> User | None:
        """Return the user registered under ``email``, or None."""
        results = self._dao.query.filter(email=normalize_email(email)).all()
        return results.first

    def find_by_role(self, role: str) -> list[User]:
        return self._dao.query.filter(role=role).limit(QUERY_LIMIT).all().items

    def find_all(self) -> list[User]:
        return self._dao.query.limit(QUERY_LIMIT).all().items
