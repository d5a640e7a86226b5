from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import DATABASE_URL, SQL_ECHO


def build_engine(url: str = DATABASE_URL) -> AsyncEngine:
    options = {"echo": SQL_ECHO, "pool_pre_ping": True}
    if not url.startswith("sqlite"):
        # sqlite pools do not take sizing arguments
        options.update(pool_size=10, max_overflow=20)
    return create_async_engine(url, **options)


def build_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine()
AsyncSessionLocal = build_sessionmaker(engine)


class Base(DeclarativeBase):
    pass


async def init_models(bind: AsyncEngine = engine) -> None:
    """Create missing tables. Alembic migrations remain the source of truth."""
    # register every mapped class on Base.metadata
    from app.models.db import Coupon, Order, Product, User  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

