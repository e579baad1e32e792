"""SQLAlchemy ORM models."""

from dailydone.models.base import Base
from dailydone.models.user import User

__all__ = ["Base", "User"]
