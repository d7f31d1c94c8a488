"""Identity providers: in-memory (bcrypt) and Firebase Identity Toolkit REST.

Both raise IdentityProviderError with Firebase-style codes so the account
flows can map failures to form fields without knowing which backend ran.
"""

import logging
import secrets
from dataclasses import dataclass

import bcrypt
import httpx

from errors import IdentityProviderError

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"
MIN_PROVIDER_PASSWORD_LENGTH = 6

# Identity Toolkit REST error messages -> client SDK error codes
FIREBASE_ERROR_CODES = {
    "EMAIL_EXISTS": "auth/email-already-in-use",
    "EMAIL_NOT_FOUND": "auth/user-not-found",
    "INVALID_PASSWORD": "auth/wrong-password",
    "INVALID_LOGIN_CREDENTIALS": "auth/invalid-credential",
    "INVALID_EMAIL": "auth/invalid-email",
    "WEAK_PASSWORD": "auth/weak-password",
    "USER_DISABLED": "auth/user-disabled",
    "INVALID_ID_TOKEN": "auth/invalid-id-token",
    "TOKEN_EXPIRED": "auth/id-token-expired",
    "USER_NOT_FOUND": "auth/user-not-found",
}


@dataclass
class User:
    uid: str
    email: str
    display_name: str = ""

    @property
    def name(self) -> str:
        """Display name, falling back to the email's local part."""
        return self.display_name or self.email.split("@")[0]

    def to_dict(self) -> dict:
        return {"uid": self.uid, "email": self.email, "display_name": self.display_name}


@dataclass
class Session:
    token: str
    user: User


class IdentityProvider:
    name = "abstract"

    async def current_user(self, token: str) -> User | None:
        raise NotImplementedError

    async def sign_in(self, email: str, password: str) -> Session:
        raise NotImplementedError

    async def sign_up(self, email: str, password: str, display_name: str = "") -> Session:
        raise NotImplementedError

    async def sign_out(self, token: str) -> None:
        raise NotImplementedError

    async def send_password_reset(self, email: str) -> None:
        raise NotImplementedError


@dataclass
class _Account:
    user: User
    password_hash: bytes


class InMemoryIdentityProvider(IdentityProvider):
    """Local accounts with bcrypt password hashes and opaque session tokens."""

    name = "memory"

    def __init__(self):
        self._accounts: dict[str, _Account] = {}
        self._sessions: dict[str, str] = {}
        self.reset_requests: list[str] = []

    def _new_session(self, user: User) -> Session:
        token = secrets.token_urlsafe(32)
        self._sessions[token] = user.uid
        return Session(token=token, user=user)

    async def current_user(self, token):
        uid = self._sessions.get(token)
        if uid is None:
            return None
        for account in self._accounts.values():
            if account.user.uid == uid:
                return account.user
        return None

    async def sign_in(self, email, password):
        account = self._accounts.get(email.lower())
        if account is None:
            raise IdentityProviderError("auth/user-not-found")
        if not bcrypt.checkpw(password.encode("utf-8"), account.password_hash):
            raise IdentityProviderError("auth/wrong-password")
        logger.info("User %s signed in", account.user.uid)
        return self._new_session(account.user)

    async def sign_up(self, email, password, display_name=""):
        key = email.lower()
        if key in self._accounts:
            raise IdentityProviderError("auth/email-already-in-use")
        if len(password) < MIN_PROVIDER_PASSWORD_LENGTH:
            raise IdentityProviderError("auth/weak-password")

        user = User(uid=secrets.token_hex(14), email=email, display_name=display_name)
        password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
        self._accounts[key] = _Account(user=user, password_hash=password_hash)
        logger.info("Registered user %s", user.uid)
        return self._new_session(user)

    async def sign_out(self, token):
        self._sessions.pop(token, None)

    async def send_password_reset(self, email):
        if email.lower() not in self._accounts:
            raise IdentityProviderError("auth/user-not-found")
        self.reset_requests.append(email)
        logger.info("Password reset requested for %s", email)


class FirebaseIdentityProvider(IdentityProvider):
    """Firebase Authentication through the Identity Toolkit REST API."""

    name = "firebase"

    def __init__(
        self,
        api_key: str,
        timeout: float = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    async def _call(self, endpoint: str, payload: dict) -> dict:
        try:
            async with httpx.AsyncClient(
                base_url=IDENTITY_TOOLKIT_URL, timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.post(f"/accounts:{endpoint}", params={"key": self._api_key}, json=payload)
        except httpx.HTTPError as e:
            logger.warning("Identity Toolkit %s failed: %s", endpoint, e)
            raise IdentityProviderError("auth/network-request-failed", str(e)) from e

        if resp.is_error:
            raise IdentityProviderError(_error_code(resp))
        return resp.json()

    @staticmethod
    def _session(data: dict) -> Session:
        user = User(
            uid=data["localId"],
            email=data.get("email", ""),
            display_name=data.get("displayName", ""),
        )
        return Session(token=data["idToken"], user=user)

    async def current_user(self, token):
        try:
            data = await self._call("lookup", {"idToken": token})
        except IdentityProviderError as e:
            logger.debug("Token lookup rejected: %s", e.code)
            return None
        users = data.get("users") or []
        if not users:
            return None
        info = users[0]
        return User(uid=info["localId"], email=info.get("email", ""), display_name=info.get("displayName", ""))

    async def sign_in(self, email, password):
        data = await self._call(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return self._session(data)

    async def sign_up(self, email, password, display_name=""):
        data = await self._call(
            "signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        if display_name:
            await self._call(
                "update",
                {"idToken": data["idToken"], "displayName": display_name, "returnSecureToken": False},
            )
            data["displayName"] = display_name
        return self._session(data)

    async def sign_out(self, token):
        # ID tokens are stateless; the client drops it and it expires on its own
        return None

    async def send_password_reset(self, email):
        await self._call("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})


def _error_code(resp: httpx.Response) -> str:
    """Map an Identity Toolkit error body to a client SDK style code."""
    try:
        message = resp.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return "auth/unknown"
    # e.g. "WEAK_PASSWORD : Password should be at least 6 characters"
    key = message.split(":", 1)[0].strip()
    return FIREBASE_ERROR_CODES.get(key, "auth/unknown")
