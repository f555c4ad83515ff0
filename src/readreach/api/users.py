"""FastAPI endpoints for application users and roles."""

from fastapi import APIRouter, Depends, Query
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from readreach.api.schemas import (
    ChangeRoleRequest,
    RegisterUserRequest,
    RegisterUserResponse,
    StatusResponse,
    UserResponse,
)
from readreach.auth.access import AuthContext, require
from readreach.identity.registration import find_or_create_user
from readreach.identity.roles import ChangeUserRole
from readreach.identity.user import User

router = APIRouter(tags=["users"])


@router.post("/users", response_model=RegisterUserResponse)
async def register_user(
    body: RegisterUserRequest | None = None,
    ctx: AuthContext = Depends(require("users:register")),
) -> RegisterUserResponse:
    """Find or create the user behind the caller's token.

    The stored email is the token's; a role in the body is ignored.
    """
    body = body or RegisterUserRequest()
    user, created = find_or_create_user(
        email=ctx.identity.email,
        name=body.name or ctx.identity.claims.get("name"),
        photo_url=body.photo_url or ctx.identity.claims.get("picture"),
    )
    return RegisterUserResponse(
        created=created,
        message="User created" if created else "User already exists",
        user=UserResponse.model_validate(user),
    )


@router.get("/user", response_model=UserResponse)
async def get_user(
    email: str | None = Query(default=None),
    ctx: AuthContext = Depends(require("users:read")),
) -> UserResponse:
    if not email:
        return UserResponse.model_validate(ctx.user)

    user = current_domain.repository_for(User).find_by_email(email)
    if user is None:
        raise ObjectNotFoundError({"_entity": f"User with email `{email}` does not exist"})
    return UserResponse.model_validate(user)


@router.get("/users", response_model=list[UserResponse])
async def list_users(ctx: AuthContext = Depends(require("users:list"))) -> list[UserResponse]:
    return [UserResponse.model_validate(u) for u in current_domain.repository_for(User).find_all()]


@router.get("/fetch-role-based-user", response_model=list[UserResponse])
async def users_by_role(
    role: str = Query(...),
    ctx: AuthContext = Depends(require("users:list_by_role")),
) -> list[UserResponse]:
    return [UserResponse.model_validate(u) for u in current_domain.repository_for(User).find_by_role(role)]


@router.patch("/update-user-role", response_model=StatusResponse)
async def update_user_role(
    body: ChangeRoleRequest,
    email: str = Query(...),
    ctx: AuthContext = Depends(require("users:change_role")),
) -> StatusResponse:
    command = ChangeUserRole(email=email, role=body.role, changed_by=ctx.user.email)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
