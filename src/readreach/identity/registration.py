"""First sign-in registration: command and handler.

Registration is a find-or-create keyed by email: a second registration for
the same address returns the stored user and creates nothing.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from readreach.domain import readreach
from readreach.identity.user import User
from readreach.utils.logging import get_logger

logger = get_logger(__name__)


@readreach.command(part_of="User")
class RegisterUser:
    email = String(required=True, max_length=254)
    name = String(max_length=255)
    photo_url = String(max_length=2048)


@readreach.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)

        existing = repo.find_by_email(command.email)
        if existing is not None:
            return {"user_id": str(existing.id), "created": False}

        user = User.register(
            email=command.email,
            name=command.name,
            photo_url=command.photo_url,
        )
        repo.add(user)
        logger.info("user_registered", user_id=str(user.id), email=user.email)
        return {"user_id": str(user.id), "created": True}


def is_duplicate_email(exc: ValidationError) -> bool:
    return "email" in (exc.messages or {})


def find_or_create_user(email, name=None, photo_url=None) -> tuple[User, bool]:
    """Register ``email`` unless already present; return ``(user, created)``.

    Two concurrent first logins race on the email uniqueness constraint; the
    loser's insert fails and it reads back the winner's record.
    """
    command = RegisterUser(email=email, name=name, photo_url=photo_url)
    try:
        result = current_domain.process(command, asynchronous=False)
    except ValidationError as exc:
        if not is_duplicate_email(exc):
            raise
        logger.info("user_registration_raced", email=email)
        result = {"created": False}

    user = current_domain.repository_for(User).find_by_email(email)
    return user, result["created"]
