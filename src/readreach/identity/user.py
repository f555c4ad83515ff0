"""User aggregate: the application identity behind a verified token.

A User is keyed by email, carries the role every access decision reads,
and is created exactly once on first sign-in.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from readreach.domain import readreach
from readreach.identity.events import UserRegistered, UserRoleChanged
from readreach.shared.email import normalize_email


class Role(Enum):
    """Coarse permission tiers."""

    USER = "user"
    LIBRARIAN = "librarian"
    ADMIN = "admin"


DEFAULT_ROLE = Role.USER.value


@readreach.aggregate
class User:
    email = String(required=True, max_length=254, unique=True)
    name = String(max_length=255)
    photo_url = String(max_length=2048)
    role = String(max_length=20, choices=Role, default=DEFAULT_ROLE)
    created_at = DateTime()

    @classmethod
    def register(cls, email, name=None, photo_url=None):
        """Create a user with the default role.

        The role is never taken from the caller; promotion is an admin action.
        """
        now = datetime.now(UTC)
        user = cls(
            email=normalize_email(email),
            name=name,
            photo_url=photo_url,
            role=DEFAULT_ROLE,
            created_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                email=user.email,
                role=user.role,
                registered_at=now,
            )
        )
        return user

    def has_role(self, *roles) -> bool:
        return self.role in {r.value if isinstance(r, Role) else r for r in roles}

    def change_role(self, new_role):
        valid = {r.value for r in Role}
        if new_role not in valid:
            raise ValidationError({"role": [f"Unknown role '{new_role}'"]})

        if new_role == self.role:
            return

        previous_role = self.role
        self.role = new_role
        self.raise_(
            UserRoleChanged(
                user_id=self.id,
                email=self.email,
                previous_role=previous_role,
                new_role=new_role,
                changed_at=datetime.now(UTC),
            )
        )
