"""SQL engine and session factory for the database-backed credential store."""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from dailydone.core.config import Settings


def create_db_engine(settings: Settings) -> Engine:
    """Build an engine for DATABASE_URL; SQLite connections may be shared across threads."""
    connect_args: dict[str, object] = {}
    if settings.DATABASE_URL.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,
        echo=settings.DEBUG,
        connect_args=connect_args,
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
