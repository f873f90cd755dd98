"""Database engine and session factory."""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from transit_tracker.core.config import settings

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=True)


@contextmanager
def session_scope() -> Iterator[Session]:
    """One session per pull, closed on every exit path."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
