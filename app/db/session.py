# app/db/session.py

from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from app.core.config import settings
from app.db.base import Base

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    # SQLite connections are shared with FastAPI's threadpool
    connect_args={"check_same_thread": False} if settings.is_sqlite else {},
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def init_db(bind=None) -> None:
    """Create the storage tables if they do not exist yet."""
    # models must be imported so they register on Base.metadata
    from app.models import storage  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
