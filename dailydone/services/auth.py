"""Auth service: login, register, token verification, logout and profile updates."""

from __future__ import annotations

import logging
import re
import secrets
from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING, Any

from dailydone.core.exceptions import (
    DuplicateKeyError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidFormatError,
    InvalidOrExpiredTokenError,
    MissingFieldsError,
    UnauthenticatedError,
    UserNotFoundError,
    WeakPasswordError,
)
from dailydone.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from dailydone.repositories.users import EMAIL_TAKEN_MESSAGE, USERNAME_TAKEN_MESSAGE
from dailydone.schemas.auth import TokenClaims
from dailydone.schemas.user import SELF_ASSIGNABLE_ROLES, NewUser, Role, UserPublic, UserRecord

if TYPE_CHECKING:
    from dailydone.core.config import Settings
    from dailydone.repositories.users import UserRepository

logger = logging.getLogger(__name__)

# Whole-string patterns; call fullmatch, not match.
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
USERNAME_PATTERN = re.compile(r"[A-Za-z0-9_]{3,20}")
# Server-side floor only; mixed-case/digit/symbol rules live in the client strength meter.
PASSWORD_MIN_LEN = 8

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"

HELPER_DASHBOARD_PATH = "/helper-dashboard"
DEFAULT_DASHBOARD_PATH = "/dashboard"

# Accounts from the original mock user list; passwords are hashed at seed time.
DEMO_USERS: tuple[dict[str, Any], ...] = (
    {
        "username": "demo",
        "email": "demo@dailydone.com",
        "name": "Demo User",
        "role": Role.USER,
        "password": "Demo123!",
        "rating": 4.8,
        "completed_tasks": 15,
        "money_saved": 2340,
    },
    {
        "username": "user",
        "email": "user@example.com",
        "name": "John Doe",
        "role": Role.USER,
        "password": "Password123!",
        "rating": 5.0,
        "completed_tasks": 8,
        "money_saved": 1200,
    },
    {
        "username": "admin",
        "email": "admin@dailydone.com",
        "name": "Admin Helper",
        "role": Role.HELPER,
        "password": "Admin123!",
        "rating": 4.9,
        "completed_tasks": 42,
        "money_saved": 0,
    },
)


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful login or registration."""

    token: str
    user: UserPublic
    redirect_url: str


def redirect_for_role(role: Role) -> str:
    """Dashboard path the client should navigate to after signing in."""
    return HELPER_DASHBOARD_PATH if role == Role.HELPER else DEFAULT_DASHBOARD_PATH


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.fullmatch(email) is not None


def is_valid_username(username: str) -> bool:
    return USERNAME_PATTERN.fullmatch(username) is not None


def _parse_role(role: str | None) -> Role:
    if role is None or role == "":
        return Role.USER
    try:
        parsed = Role(role.lower())
    except ValueError:
        parsed = None
    if parsed not in SELF_ASSIGNABLE_ROLES:
        raise InvalidFormatError("Role must be either 'user' or 'helper'")
    return parsed


class AuthService:
    """
    Stateless per-request auth operations over an injected credential store.

    Every failure is raised as an AuthServiceError subclass carrying the HTTP
    status the API layer should answer with.
    """

    def __init__(self, repository: UserRepository, settings: Settings) -> None:
        self.repository = repository
        self.settings = settings

    @cached_property
    def _dummy_password_hash(self) -> str:
        """Hash checked for unknown emails so both login failures cost one bcrypt round."""
        return hash_password(secrets.token_urlsafe(16), rounds=self.settings.BCRYPT_ROUNDS)

    def _issue(self, user: UserRecord) -> AuthResult:
        token = create_access_token(
            TokenClaims(user_id=user.id, email=user.email, role=user.role),
            settings=self.settings,
        )
        return AuthResult(token=token, user=user.to_public(), redirect_url=redirect_for_role(user.role))

    def login(self, email: str | None, password: str | None) -> AuthResult:
        if not email or not password:
            raise MissingFieldsError("Email and password are required")

        user = self.repository.find_by_email(email)
        stored_hash = user.password_hash if user is not None else self._dummy_password_hash
        if not verify_password(password, stored_hash) or user is None:
            logger.info("Login failed", extra={"auth_event": "login", "status": "failure"})
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        logger.info(
            "Login succeeded",
            extra={"auth_event": "login", "status": "success", "user_id": user.id},
        )
        return self._issue(user)

    def register(
        self,
        username: str | None,
        email: str | None,
        password: str | None,
        name: str | None,
        role: str | None = None,
    ) -> AuthResult:
        if not username or not email or not password or not name:
            raise MissingFieldsError("All fields are required")
        if not is_valid_email(email):
            raise InvalidFormatError("Invalid email format")
        if not is_valid_username(username):
            raise InvalidFormatError(
                "Username must be 3-20 characters: letters, numbers, and underscore only"
            )
        if len(password) < PASSWORD_MIN_LEN:
            raise WeakPasswordError(
                f"Password must be at least {PASSWORD_MIN_LEN} characters long"
            )
        parsed_role = _parse_role(role)

        if self.repository.find_by_email(email):
            raise DuplicateKeyError(EMAIL_TAKEN_MESSAGE, field="email")
        if self.repository.find_by_username(username):
            raise DuplicateKeyError(USERNAME_TAKEN_MESSAGE, field="username")

        # The store re-checks uniqueness atomically; the lookups above only fail fast
        # before paying for the hash.
        user = self.repository.insert(
            NewUser(
                username=username.lower(),
                email=email.lower(),
                name=name,
                role=parsed_role,
                password_hash=hash_password(password, rounds=self.settings.BCRYPT_ROUNDS),
            )
        )
        logger.info(
            "User registered",
            extra={"auth_event": "register", "user_id": user.id, "role": user.role.value},
        )
        return self._issue(user)

    def authenticate(self, token: str | None) -> UserRecord:
        """Resolve a bearer token to the current stored user."""
        if not token:
            raise UnauthenticatedError("No token provided")
        claims = decode_access_token(token, settings=self.settings)
        if claims is None:
            raise InvalidOrExpiredTokenError("Invalid or expired token")
        user = self.repository.find_by_id(claims.user_id)
        if user is None:
            raise UserNotFoundError("User not found")
        return user

    def verify_token(self, token: str | None) -> UserPublic:
        """Sanitized user read fresh from the store, so profile edits are visible."""
        return self.authenticate(token).to_public()

    def logout(self, token: str | None = None) -> None:
        """Nothing to revoke server side; the client discards its token."""
        claims = decode_access_token(token, settings=self.settings) if token else None
        logger.info(
            "Logout",
            extra={"auth_event": "logout", "user_id": claims.user_id if claims else None},
        )

    def update_profile(
        self,
        user_id: str,
        name: str | None = None,
        email: str | None = None,
        completed_tasks: int | None = None,
        money_saved: int | None = None,
    ) -> UserPublic:
        patch: dict[str, Any] = {}
        if name is not None:
            if not name.strip():
                raise InvalidFormatError("Name cannot be empty")
            patch["name"] = name
        if email is not None:
            if not is_valid_email(email):
                raise InvalidFormatError("Invalid email format")
            patch["email"] = email.lower()
        for field, value in (("completed_tasks", completed_tasks), ("money_saved", money_saved)):
            if value is None:
                continue
            if value < 0:
                raise InvalidFormatError(f"{field} must be zero or greater")
            patch[field] = value

        user = self.repository.update(user_id, patch) if patch else self.repository.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError("User not found")
        logger.info(
            "Profile updated",
            extra={"auth_event": "profile_update", "user_id": user_id, "fields": sorted(patch)},
        )
        return user.to_public()

    def list_users(self, requester: UserRecord) -> list[UserPublic]:
        if requester.role != Role.ADMIN:
            raise ForbiddenError("Admin access required")
        return [user.to_public() for user in self.repository.list_users()]

    def seed_demo_users(self) -> int:
        """Insert the demo accounts that are missing. Returns how many were created."""
        created = 0
        for demo in DEMO_USERS:
            if self.repository.find_by_email(demo["email"]) or self.repository.find_by_username(
                demo["username"]
            ):
                continue
            fields = {k: v for k, v in demo.items() if k != "password"}
            self.repository.insert(
                NewUser(
                    **fields,
                    password_hash=hash_password(demo["password"], rounds=self.settings.BCRYPT_ROUNDS),
                )
            )
            created += 1
        if created:
            logger.info("Seeded demo users: created=%s", created)
        return created
