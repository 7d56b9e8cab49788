"""
Database layer — declarative base shared by the SQLAlchemy-backed stores.

    session_factory, engine = await create_database("sqlite+aiosqlite:///:memory:")
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


async def create_database(
    url: str = "sqlite+aiosqlite:///:memory:",
    *,
    echo: bool = False,
) -> tuple[async_sessionmaker[AsyncSession], AsyncEngine]:
    """Create all storefront tables and return (session_factory, engine)."""
    # Table modules register themselves on Base.metadata when imported.
    import storefront.cart._sqlalchemy  # noqa: F401
    import storefront.idempotency._sqlalchemy  # noqa: F401
    import storefront.orders._sqlalchemy  # noqa: F401

    engine = create_async_engine(url, echo=echo)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    return async_sessionmaker(engine, expire_on_commit=False), engine


__all__ = ("Base", "create_database")
