"""Credential store: the repository contract plus in-memory and SQL implementations."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from dailydone.core.database import create_db_engine, create_session_factory
from dailydone.core.exceptions import DuplicateKeyError, UserNotFoundError
from dailydone.models import User
from dailydone.schemas.user import NewUser, UserRecord

if TYPE_CHECKING:
    from dailydone.core.config import Settings

logger = logging.getLogger(__name__)

# Fields update() may change; id, username, role, password_hash and created_at are fixed.
UPDATABLE_FIELDS = frozenset({"name", "email", "rating", "completed_tasks", "money_saved"})

EMAIL_TAKEN_MESSAGE = "Email already registered"
USERNAME_TAKEN_MESSAGE = "Username already taken"


def _check_patch(patch: dict[str, Any]) -> dict[str, Any]:
    unknown = set(patch) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
    if "email" in patch:
        patch = {**patch, "email": patch["email"].lower()}
    return patch


class UserRepository(ABC):
    """Lookups are case-insensitive on email and username. Implementations keep both unique."""

    @abstractmethod
    def find_by_email(self, email: str) -> UserRecord | None: ...

    @abstractmethod
    def find_by_username(self, username: str) -> UserRecord | None: ...

    @abstractmethod
    def find_by_id(self, user_id: str) -> UserRecord | None: ...

    @abstractmethod
    def insert(self, user: NewUser) -> UserRecord:
        """Store a new user and assign its id. Raises DuplicateKeyError on email/username collision."""

    @abstractmethod
    def update(self, user_id: str, patch: dict[str, Any]) -> UserRecord:
        """Merge patch into the user. Raises UserNotFoundError, DuplicateKeyError or ValueError."""

    @abstractmethod
    def list_users(self) -> list[UserRecord]: ...


class InMemoryUserRepository(UserRepository):
    """
    Process-local list of users with sequential string ids ("1", "2", ...).

    A lock makes the duplicate check and the append one step, so concurrent
    registrations of the same username cannot both succeed. Records are copied
    on the way in and out.
    """

    def __init__(self) -> None:
        self._users: list[UserRecord] = []
        self._next_id = 1
        self._lock = threading.RLock()

    def _find(self, field: str, value: str) -> UserRecord | None:
        needle = value.lower()
        for user in self._users:
            if getattr(user, field).lower() == needle:
                return user
        return None

    def find_by_email(self, email: str) -> UserRecord | None:
        with self._lock:
            user = self._find("email", email)
            return user.model_copy() if user else None

    def find_by_username(self, username: str) -> UserRecord | None:
        with self._lock:
            user = self._find("username", username)
            return user.model_copy() if user else None

    def find_by_id(self, user_id: str) -> UserRecord | None:
        with self._lock:
            for user in self._users:
                if user.id == user_id:
                    return user.model_copy()
            return None

    def insert(self, user: NewUser) -> UserRecord:
        with self._lock:
            if self._find("email", user.email):
                raise DuplicateKeyError(EMAIL_TAKEN_MESSAGE, field="email")
            if self._find("username", user.username):
                raise DuplicateKeyError(USERNAME_TAKEN_MESSAGE, field="username")
            record = UserRecord(
                id=str(self._next_id),
                **user.model_dump(),
            )
            self._next_id += 1
            self._users.append(record)
            return record.model_copy()

    def update(self, user_id: str, patch: dict[str, Any]) -> UserRecord:
        patch = _check_patch(patch)
        with self._lock:
            for index, user in enumerate(self._users):
                if user.id == user_id:
                    break
            else:
                raise UserNotFoundError("User not found")
            if "email" in patch:
                other = self._find("email", patch["email"])
                if other is not None and other.id != user_id:
                    raise DuplicateKeyError(EMAIL_TAKEN_MESSAGE, field="email")
            updated = user.model_copy(update=patch)
            self._users[index] = updated
            return updated.model_copy()

    def list_users(self) -> list[UserRecord]:
        with self._lock:
            return [user.model_copy() for user in self._users]


class SqlAlchemyUserRepository(UserRepository):
    """Same contract backed by the users table. Unique indexes are the final arbiter."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    @staticmethod
    def _to_record(row: User) -> UserRecord:
        return UserRecord(
            id=str(row.id),
            username=row.username,
            email=row.email,
            name=row.name,
            role=row.role,
            password_hash=row.password_hash,
            rating=row.rating,
            completed_tasks=row.completed_tasks,
            money_saved=row.money_saved,
            created_at=row.created_at,
        )

    @staticmethod
    def _parse_id(user_id: str) -> int | None:
        try:
            return int(user_id)
        except (TypeError, ValueError):
            return None

    def find_by_email(self, email: str) -> UserRecord | None:
        with self._session_factory() as db:
            row = db.query(User).filter(func.lower(User.email) == email.lower()).first()
            return self._to_record(row) if row else None

    def find_by_username(self, username: str) -> UserRecord | None:
        with self._session_factory() as db:
            row = db.query(User).filter(func.lower(User.username) == username.lower()).first()
            return self._to_record(row) if row else None

    def find_by_id(self, user_id: str) -> UserRecord | None:
        pk = self._parse_id(user_id)
        if pk is None:
            return None
        with self._session_factory() as db:
            row = db.get(User, pk)
            return self._to_record(row) if row else None

    def insert(self, user: NewUser) -> UserRecord:
        if self.find_by_email(user.email):
            raise DuplicateKeyError(EMAIL_TAKEN_MESSAGE, field="email")
        if self.find_by_username(user.username):
            raise DuplicateKeyError(USERNAME_TAKEN_MESSAGE, field="username")
        row = User(
            username=user.username.lower(),
            email=user.email.lower(),
            name=user.name,
            role=user.role.value,
            password_hash=user.password_hash,
            rating=user.rating,
            completed_tasks=user.completed_tasks,
            money_saved=user.money_saved,
            created_at=user.created_at,
        )
        with self._session_factory() as db:
            db.add(row)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                logger.info("Insert lost a uniqueness race for username=%s", user.username)
                raise DuplicateKeyError("Email or username already registered") from e
            db.refresh(row)
            return self._to_record(row)

    def update(self, user_id: str, patch: dict[str, Any]) -> UserRecord:
        patch = _check_patch(patch)
        pk = self._parse_id(user_id)
        with self._session_factory() as db:
            row = db.get(User, pk) if pk is not None else None
            if row is None:
                raise UserNotFoundError("User not found")
            if "email" in patch:
                other = (
                    db.query(User)
                    .filter(func.lower(User.email) == patch["email"], User.id != pk)
                    .first()
                )
                if other is not None:
                    raise DuplicateKeyError(EMAIL_TAKEN_MESSAGE, field="email")
            for field, value in patch.items():
                setattr(row, field, value)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise DuplicateKeyError(EMAIL_TAKEN_MESSAGE, field="email") from e
            db.refresh(row)
            return self._to_record(row)

    def list_users(self) -> list[UserRecord]:
        with self._session_factory() as db:
            return [self._to_record(row) for row in db.query(User).order_by(User.id).all()]


def build_user_repository(settings: "Settings") -> UserRepository:
    """Repository selected by USER_STORE."""
    if settings.USER_STORE == "database":
        engine = create_db_engine(settings)
        return SqlAlchemyUserRepository(create_session_factory(engine))
    return InMemoryUserRepository()
