"""Database session configuration."""

from __future__ import annotations

from collections.abc import Generator, Iterator
from contextlib import contextmanager

from fastapi import Request
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from aura_share.core.settings import Settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


def build_engine(settings: Settings) -> Engine:
    """Create the engine for the configured database URL."""
    url = settings.effective_database_url
    connect_args: dict[str, object] = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(
        url,
        pool_pre_ping=True,
        echo=settings.sql_debug,
        connect_args=connect_args,
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return a session factory bound to ``engine``."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """Run a multi-step write as one transaction.

    Commits when the block exits normally; rolls back and re-raises otherwise.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def create_tables(engine: Engine) -> None:
    """Create all database tables."""
    # Ensure model modules are imported so that metadata is populated.
    import aura_share.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def drop_tables(engine: Engine) -> None:
    """Drop all database tables."""
    import aura_share.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
