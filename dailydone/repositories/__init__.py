"""Credential store implementations."""

from dailydone.repositories.users import (
    InMemoryUserRepository,
    SqlAlchemyUserRepository,
    UserRepository,
    build_user_repository,
)

__all__ = [
    "InMemoryUserRepository",
    "SqlAlchemyUserRepository",
    "UserRepository",
    "build_user_repository",
]
