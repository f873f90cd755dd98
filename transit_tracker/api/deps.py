"""API dependencies"""

from typing import Generator

from fastapi import HTTPException
from sqlalchemy.orm import Session

from transit_tracker.core.db import SessionLocal
from transit_tracker.core.errors import FeedError
from transit_tracker.ingestion.base import BaseSource
from transit_tracker.ingestion.gtfs_source import build_default_source


def get_db() -> Generator[Session, None, None]:
    """Database dependency"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_feed_source() -> BaseSource:
    """Feed source dependency"""
    try:
        return build_default_source()
    except FeedError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
