"""Role administration command and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import String
from protean.utils.globals import current_domain

from readreach.domain import readreach
from readreach.identity.user import User
from readreach.utils.logging import get_logger

logger = get_logger(__name__)


@readreach.command(part_of="User")
class ChangeUserRole:
    email = String(required=True, max_length=254)
    role = String(required=True, max_length=20)
    changed_by = String(max_length=254)


@readreach.command_handler(part_of=User)
class ChangeUserRoleHandler:
    @handle(ChangeUserRole)
    def change_user_role(self, command):
        repo = current_domain.repository_for(User)
        user = repo.find_by_email(command.email)
        if user is None:
            raise ObjectNotFoundError({"_entity": f"User with email `{command.email}` does not exist"})

        previous_role = user.role
        user.change_role(command.role)
        repo.add(user)
        logger.info(
            "user_role_changed",
            email=user.email,
            previous_role=previous_role,
            new_role=user.role,
            changed_by=command.changed_by,
        )
        return str(user.id)
