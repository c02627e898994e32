"""
FastAPI dependencies.
"""

from typing import Generator
from fastapi import Request
from sqlalchemy.orm import Session
from app.database import SessionLocal
from app.services.notifier import ChangeNotifier


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for getting database sessions.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_notifier(request: Request) -> ChangeNotifier:
    """
    Dependency wrapping the app's publisher, if one is installed.
    """
    return ChangeNotifier(getattr(request.app.state, "publisher", None))
