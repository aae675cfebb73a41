# app/database/connection.py
import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from config.appconfig import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def _engine_options() -> dict:
    options = {"echo": settings.SQL_ECHO, "pool_pre_ping": True}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            pool_timeout=settings.DB_POOL_TIMEOUT,
        )
    return options


engine = create_async_engine(settings.DATABASE_URL, **_engine_options())

SessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request. Services commit or roll back explicitly."""
    async with SessionLocal() as session:
        yield session


async def init_models() -> None:
    """Create all tables registered in app.model_registry."""
    import app.model_registry  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables verified")
