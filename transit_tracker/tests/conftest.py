"""Shared fixtures: in-memory database, fixed clock, log capture."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PULL_ENABLED", "false")
os.environ.setdefault("RETENTION_ENABLED", "false")

from datetime import datetime, timezone

import pytest
from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from transit_tracker.models import Base


@pytest.fixture
def engine():
    """SQLite engine shared across threads (TestClient runs in its own)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    """Database session bound to the in-memory engine"""
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def now():
    """Fixed ingestion time"""
    return datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def log_messages():
    """Capture loguru messages at WARNING and above"""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)
