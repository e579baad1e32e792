"""ORM model for user accounts (database-backed credential store)."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Float, Integer, String

from dailydone.models.base import Base


class User(Base):
    """
    User account for JWT authentication and role-based dashboards.

    username and email are stored lowercased; the unique indexes therefore
    enforce case-insensitive uniqueness.
    role: 'user', 'helper' or 'admin'
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(20), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="user")
    password_hash = Column(String(255), nullable=False)
    rating = Column(Float, nullable=False, default=5.0)
    completed_tasks = Column(Integer, nullable=False, default=0)
    money_saved = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )
