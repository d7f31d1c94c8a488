"""FastAPI dependencies: services from app state and the authenticated user."""

from dataclasses import dataclass

from fastapi import Header, Request

from errors import NotAuthenticatedError
from services.accounts import AccountService
from services.categories import CategoryService
from services.identity import User
from services.profile import ProfileService
from services.transactions import TransactionService


@dataclass
class Services:
    """Everything the routes need, built once by the composition root."""

    accounts: AccountService
    transactions: TransactionService
    categories: CategoryService
    profiles: ProfileService


@dataclass
class CurrentUser:
    user: User
    token: str


def get_services(request: Request) -> Services:
    return request.app.state.services


def bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user(
    request: Request,
    authorization: str | None = Header(None),
) -> CurrentUser:
    """Resolve the bearer token to a user or fail with 401."""
    token = bearer_token(authorization)
    if token is None:
        raise NotAuthenticatedError("Missing bearer token")
    user = await request.app.state.identity.current_user(token)
    if user is None:
        raise NotAuthenticatedError("Invalid or expired session")
    return CurrentUser(user=user, token=token)
