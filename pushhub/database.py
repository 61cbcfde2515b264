"""Database engine, sessions and the declarative base shared by all models."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from pushhub.config import get_settings

settings = get_settings()


def build_engine(database_url: str) -> Engine:
    """Create an engine for the API process or a dispatch worker.

    SQLite (local runs and tests) is used from threads other than the one that
    opened the connection, so the same-thread check is disabled.
    """
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base: Any = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a request-scoped database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create all tables (local setup; deployments run alembic migrations)."""
    from pushhub import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
