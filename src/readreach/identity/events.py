"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from readreach.domain import readreach


@readreach.event(part_of="User")
class UserRegistered:
    """An application user was created on first sign-in."""

    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True)
    role: String(required=True)
    registered_at: DateTime(required=True)


@readreach.event(part_of="User")
class UserRoleChanged:
    """An admin moved a user to a different role."""

    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True)
    previous_role: String(required=True)
    new_role: String(required=True)
    changed_at: DateTime(required=True)
