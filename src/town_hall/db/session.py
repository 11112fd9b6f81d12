"""Engine, session factory and request-scoped sessions for Town Hall."""
from __future__ import annotations

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from town_hall.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base for the question, vote and subscription tables."""


# Models register their tables on Base.metadata at import time.
import town_hall.models  # noqa: E402,F401

engine = create_engine(settings.effective_database_url, pool_pre_ping=True, echo=settings.sql_debug)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield one session per request; services commit or roll back themselves."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind: Engine | None = None) -> list[str]:
    """Create any missing tables and return the names of all known tables.

    Used by ``town-hall-admin init-db`` to bootstrap a development database
    without running the Alembic migrations.
    """
    target = bind if bind is not None else engine
    Base.metadata.create_all(bind=target)
    return [table.name for table in Base.metadata.sorted_tables]
