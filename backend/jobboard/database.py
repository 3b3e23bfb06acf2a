"""
Database engines and sessions

The API runs on an async engine (aiosqlite); Celery workers use a plain
synchronous engine on the same database. Both are built from DATABASE_URL,
which is written in its synchronous form (sqlite:///path).
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session
from jobboard.config import get_settings

settings = get_settings()

SQLITE_PREFIX = "sqlite:///"


def async_url(url: str) -> str:
    """sqlite:///x.db -> sqlite+aiosqlite:///x.db; other URLs pass through."""
    if url.startswith(SQLITE_PREFIX):
        return url.replace(SQLITE_PREFIX, "sqlite+aiosqlite:///", 1)
    return url


def ensure_sqlite_dir(url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    if not url.startswith(SQLITE_PREFIX):
        return
    path = url[len(SQLITE_PREFIX):]
    if path and path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)


engine = create_async_engine(async_url(settings.database_url), echo=False)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

sync_engine = create_engine(settings.database_url, echo=False)
SyncSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=sync_engine)


class Base(DeclarativeBase):
    pass


async def get_db():
    async with async_session() as session:
        yield session


@contextmanager
def sync_session() -> Iterator[Session]:
    """Short-lived synchronous session for Celery tasks; always closed."""
    session = SyncSessionLocal()
    try:
        yield session
    finally:
        session.close()


async def init_db():
    # Table classes must be imported before create_all sees them
    import jobboard.models  # noqa: F401

    ensure_sqlite_dir(settings.database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
