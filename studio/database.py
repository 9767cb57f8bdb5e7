"""
Async SQLAlchemy engine + session factory.

The default URL targets TiDB / MySQL through the aiomysql driver; any
SQLAlchemy async URL can be supplied via DATABASE_URL.
The engine is created once at import and reused across all requests.
"""
import logging

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from studio.config import settings

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    # SQLite (local dev / tests) rejects the pool sizing arguments
    if make_url(url).get_backend_name() == "sqlite":
        return {"echo": False}
    return {"pool_pre_ping": True, "pool_size": 20, "max_overflow": 10, "echo": False}


engine = create_async_engine(settings.db_url, **_engine_options(settings.db_url))

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def init_db() -> None:
    """Create all tables if they don't exist (idempotent)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")


async def get_db():
    """FastAPI dependency that yields an async DB session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
