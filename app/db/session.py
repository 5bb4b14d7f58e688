from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.core.config import settings

DATABASE_URL = settings.DATABASE_URL.strip()


class Base(DeclarativeBase):
    """Global SQLAlchemy Base for all models."""
    pass


def make_engine(url: str):
    if url.startswith("sqlite"):
        # Request workers share the file; pysqlite waits up to `timeout` seconds on a locked database.
        return create_engine(url, connect_args={"check_same_thread": False, "timeout": 15}, future=True)
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=5,
        max_overflow=10,
        future=True,
    )


engine = make_engine(DATABASE_URL)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
    future=True,
)

def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
