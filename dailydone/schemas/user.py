"""User record, role enumeration and the sanitized wire representation."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    """Closed set of roles. ADMIN is only reachable through out-of-band provisioning."""

    USER = "user"
    HELPER = "helper"
    ADMIN = "admin"


# Roles a caller may pick for themselves at registration.
SELF_ASSIGNABLE_ROLES = frozenset({Role.USER, Role.HELPER})


def _utcnow() -> datetime:
    return datetime.now(UTC)


class NewUser(BaseModel):
    """User fields supplied at creation; the store assigns the id."""

    username: str
    email: str
    name: str
    role: Role = Role.USER
    password_hash: str
    rating: float = 5.0
    completed_tasks: int = 0
    money_saved: int = 0
    created_at: datetime = Field(default_factory=_utcnow)


class UserRecord(NewUser):
    """Stored user, including the password hash. Never serialize this to clients."""

    id: str

    def to_public(self) -> "UserPublic":
        return UserPublic.model_validate(self.model_dump(exclude={"password_hash"}))


class UserPublic(BaseModel):
    """Sanitized user: the record without its password hash, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    username: str
    email: str
    name: str
    role: Role
    rating: float
    completed_tasks: int
    money_saved: int
    created_at: datetime


class ProfileUpdateRequest(BaseModel):
    """Body for PATCH /users/me. Role, username and password are not editable here."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str | None = None
    email: str | None = None
    completed_tasks: int | None = None
    money_saved: int | None = None
