"""
Dependency injection for FastAPI endpoints.
"""
from functools import lru_cache
from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from app.db.base import SessionLocal
from app.services.content_store import ContentStore
from app.services.exam_service import ExamService
from app.services.lexicon_cache import LexiconCache


def get_db() -> Generator:
    """
    Dependency for database session.

    Yields:
        Database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_exam_service(db: Session = Depends(get_db)) -> ExamService:
    """
    Exam service bound to the request's database session.

    Args:
        db: Database session

    Returns:
        ExamService
    """
    return ExamService(ContentStore(db))


@lru_cache
def get_lexicon_cache() -> LexiconCache:
    """Process-wide lexicon cache; the Redis client pools its own connections."""
    return LexiconCache.from_settings()
