"""Sign-up, sign-in, sign-out and password reset flows.

Form fields are validated before the identity provider is called, and
provider error codes are mapped back onto the field they concern.
"""

import logging
import re

from errors import AuthenticationError, FormValidationError, IdentityProviderError
from services.cache import TransactionCache
from services.categories import CategoryService
from services.identity import IdentityProvider, Session, User
from services.profile import ProfileService

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8

# provider code -> (form field, message)
PROVIDER_ERRORS = {
    "auth/user-not-found": ("email", "No account found with this email"),
    "auth/wrong-password": ("password", "Incorrect password"),
    "auth/invalid-email": ("email", "Invalid email address"),
    "auth/invalid-credential": ("password", "Invalid email or password"),
    "auth/email-already-in-use": ("email", "An account with this email already exists"),
    "auth/weak-password": ("password", "Password is too weak"),
}


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email))


def _check_email(email: str, errors: dict[str, str]) -> None:
    if not email:
        errors["email"] = "Email is required"
    elif not is_valid_email(email):
        errors["email"] = "Please enter a valid email address"


def validate_sign_in(email: str, password: str) -> None:
    errors: dict[str, str] = {}
    _check_email(email, errors)
    if not password:
        errors["password"] = "Password is required"
    if errors:
        raise FormValidationError(errors)


def validate_sign_up(name: str, email: str, password: str) -> None:
    errors: dict[str, str] = {}
    if not name:
        errors["name"] = "Full name is required"
    _check_email(email, errors)
    if not password:
        errors["password"] = "Password is required"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    if errors:
        raise FormValidationError(errors)


def _provider_failure(exc: IdentityProviderError, fallback: str, status_code: int) -> AuthenticationError:
    field, message = PROVIDER_ERRORS.get(exc.code, ("password", fallback))
    return AuthenticationError(field, message, status_code=status_code)


class AccountService:
    def __init__(
        self,
        identity: IdentityProvider,
        cache: TransactionCache,
        categories: CategoryService,
        profiles: ProfileService,
    ):
        self.identity = identity
        self.cache = cache
        self.categories = categories
        self.profiles = profiles

    async def sign_in(self, email: str, password: str) -> Session:
        email = (email or "").strip()
        validate_sign_in(email, password)
        try:
            return await self.identity.sign_in(email, password)
        except IdentityProviderError as e:
            logger.info("Sign in rejected for %s: %s", email, e.code)
            raise _provider_failure(e, "Sign in failed. Please try again.", 401) from e

    async def sign_up(self, name: str, email: str, password: str) -> Session:
        name = (name or "").strip()
        email = (email or "").strip()
        validate_sign_up(name, email, password)
        try:
            session = await self.identity.sign_up(email, password, display_name=name)
        except IdentityProviderError as e:
            logger.info("Sign up rejected for %s: %s", email, e.code)
            raise _provider_failure(e, "Sign up failed. Please try again.", 400) from e

        await self.profiles.create_profile(session.user)
        await self.categories.seed_defaults(session.user.uid)
        return session

    async def sign_out(self, user: User, token: str) -> None:
        await self.identity.sign_out(token)
        self.cache.invalidate(user.uid)
        logger.info("User %s signed out", user.uid)

    async def request_password_reset(self, email: str) -> None:
        email = (email or "").strip()
        errors: dict[str, str] = {}
        _check_email(email, errors)
        if errors:
            raise FormValidationError(errors)
        try:
            await self.identity.send_password_reset(email)
        except IdentityProviderError as e:
            raise _provider_failure(e, "Password reset failed. Please try again.", 400) from e
