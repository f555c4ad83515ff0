"""Access control for HTTP operations.

Every protected operation is named in ``ACCESS_RULES``. A rule lists the
roles allowed to call it and, optionally, an ownership predicate that runs
only after the role check has passed. Routes declare their operation with
``Depends(require("orders:cancel"))`` and receive an ``AuthContext``.

A request is handled in three steps, each of which can stop it:

1. the bearer token is verified (missing or malformed header: 401, no
   identity-provider call; rejected token: 403);
2. the verified email is resolved to a stored User (unknown: 401);
3. the rule is evaluated (wrong role or not the owner: 403).

Roles are read from the store on every request, so a role change applies
to the caller's next request.
"""

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fastapi import HTTPException, Request
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from readreach.auth.tokens import InvalidTokenError, MissingCredentialsError, VerifiedIdentity, verify
from readreach.catalogue.book import Book
from readreach.identity.user import Role, User
from readreach.ordering.order import Order
from readreach.shared.email import same_email
from readreach.utils.logging import get_logger

logger = get_logger(__name__)

OwnershipCheck = Callable[[User, Request], bool | Awaitable[bool]]


@dataclass(frozen=True)
class AccessRule:
    """Roles allowed to call an operation; ``None`` means any verified token."""

    roles: frozenset[str] | None
    owns: OwnershipCheck | None = None


@dataclass(frozen=True)
class AuthContext:
    identity: VerifiedIdentity
    user: User | None


def _roles(*roles: Role) -> frozenset[str]:
    return frozenset(role.value for role in roles)


# ---------------------------------------------------------------------------
# Ownership predicates
# ---------------------------------------------------------------------------
def email_param_is_caller(user: User, request: Request) -> bool:
    """``?email=`` is absent or names the caller."""
    email = request.query_params.get("email")
    return not email or same_email(email, user.email)


def email_param_is_caller_or_admin(user: User, request: Request) -> bool:
    return user.has_role(Role.ADMIN) or email_param_is_caller(user, request)


def _load(aggregate_cls, identifier):
    if not identifier:
        return None
    try:
        return current_domain.repository_for(aggregate_cls).get(identifier)
    except ObjectNotFoundError:
        return None


def book_is_callers(user: User, request: Request) -> bool:
    """The path's book was listed by the caller. Admins may act on any book."""
    if user.has_role(Role.ADMIN):
        return True
    book = _load(Book, request.path_params.get("book_id"))
    return book is not None and same_email(book.librarian_email, user.email)


def order_is_purchasers(user: User, request: Request) -> bool:
    order = _load(Order, request.path_params.get("order_id"))
    return order is not None and same_email(order.email, user.email)


def order_is_librarians(user: User, request: Request) -> bool:
    """The path's order is for a book the caller listed."""
    order = _load(Order, request.path_params.get("order_id"))
    return order is not None and same_email(order.librarian_email, user.email)


async def checkout_order_is_purchasers(user: User, request: Request) -> bool:
    """The order named in the checkout body belongs to the caller.

    Clients send the order id as ``orderId``; older clients send it as
    ``bookId``.
    """
    try:
        body = await request.json()
    except ValueError:
        return False
    if not isinstance(body, dict):
        return False

    order_id = body.get("orderId") or body.get("bookId")
    order = _load(Order, order_id)
    return order is not None and same_email(order.email, user.email)


ANY_ROLE = _roles(Role.USER, Role.LIBRARIAN, Role.ADMIN)
ADMIN = _roles(Role.ADMIN)
LIBRARIAN = _roles(Role.LIBRARIAN)
PURCHASER = _roles(Role.USER)

ACCESS_RULES: dict[str, AccessRule] = {
    # Catalogue
    "books:list_all": AccessRule(ADMIN),
    "books:list_mine": AccessRule(LIBRARIAN, owns=email_param_is_caller),
    "books:add": AccessRule(LIBRARIAN),
    "books:update": AccessRule(LIBRARIAN, owns=book_is_callers),
    "books:publish": AccessRule(_roles(Role.LIBRARIAN, Role.ADMIN), owns=book_is_callers),
    "books:delete": AccessRule(ADMIN),
    # Users
    "users:register": AccessRule(None),
    "users:read": AccessRule(ANY_ROLE, owns=email_param_is_caller_or_admin),
    "users:list": AccessRule(ADMIN),
    "users:list_by_role": AccessRule(ADMIN),
    "users:change_role": AccessRule(ADMIN),
    # Orders
    "orders:list_all": AccessRule(ADMIN),
    "orders:list_mine": AccessRule(PURCHASER, owns=email_param_is_caller),
    "orders:list_librarian": AccessRule(LIBRARIAN, owns=email_param_is_caller),
    "orders:place": AccessRule(PURCHASER),
    "orders:cancel": AccessRule(PURCHASER, owns=order_is_purchasers),
    "orders:advance": AccessRule(LIBRARIAN, owns=order_is_librarians),
    # Payments
    "payments:list_all": AccessRule(ADMIN),
    "payments:list_mine": AccessRule(PURCHASER, owns=email_param_is_caller),
    "checkout:create": AccessRule(PURCHASER, owns=checkout_order_is_purchasers),
    "checkout:status": AccessRule(PURCHASER),
}


# ---------------------------------------------------------------------------
# Decision point
# ---------------------------------------------------------------------------
def resolve_user(email: str) -> User | None:
    """Look up the application user for a verified email. Never cached."""
    return current_domain.repository_for(User).find_by_email(email)


async def authorize(user: User, rule: AccessRule, request: Request) -> bool:
    if rule.roles is not None and user.role not in rule.roles:
        return False

    if rule.owns is None:
        return True

    allowed = rule.owns(user, request)
    if inspect.isawaitable(allowed):
        allowed = await allowed
    return bool(allowed)


def require(operation: str):
    """FastAPI dependency guarding ``operation`` with its access rule."""
    rule = ACCESS_RULES[operation]

    async def dependency(request: Request) -> AuthContext:
        try:
            identity = verify(request.headers.get("Authorization"), request.app.state.verifier)
        except MissingCredentialsError as exc:
            raise HTTPException(status_code=401, detail="Unauthorized") from exc
        except InvalidTokenError as exc:
            logger.info("token_rejected", operation=operation, reason=str(exc))
            raise HTTPException(status_code=403, detail="Forbidden") from exc

        if rule.roles is None:
            return AuthContext(identity=identity, user=resolve_user(identity.email))

        user = resolve_user(identity.email)
        if user is None:
            logger.info("unknown_user", operation=operation, email=identity.email)
            raise HTTPException(status_code=401, detail="Unauthorized")

        if not await authorize(user, rule, request):
            logger.info("access_denied", operation=operation, email=user.email, role=user.role)
            raise HTTPException(status_code=403, detail="Forbidden")

        return AuthContext(identity=identity, user=user)

    return dependency
