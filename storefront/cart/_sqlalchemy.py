"""
SQLAlchemy cart store — one JSON row per cart key.

Usage:
    session_factory, _ = await create_database(url)
    store = SQLAlchemyCartStore(session_factory)
    await store.save(cart_key(user.id), state)
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db import Base
from storefront.cart._types import CartState
from storefront.cart._store import dump_state, load_state


class CartTable(Base):
    __tablename__ = "carts"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class SQLAlchemyCartStore:
    """CartStore backed by the `carts` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def load(self, key: str) -> CartState | None:
        async with self._session_factory() as session:
            row = (
                await session.execute(select(CartTable).where(CartTable.key == key))
            ).scalar_one_or_none()
            return load_state(row.payload) if row is not None else None

    async def save(self, key: str, state: CartState) -> None:
        async with self._session_factory() as session:
            row = await session.get(CartTable, key)
            if row is None:
                session.add(CartTable(key=key, payload=dump_state(state), updated_at=datetime.now()))
            else:
                row.payload = dump_state(state)
                row.updated_at = datetime.now()
            await session.commit()

    async def delete(self, key: str) -> bool:
        async with self._session_factory() as session:
            row = await session.get(CartTable, key)
            if row is None:
                return False
            await session.delete(row)
            await session.commit()
            return True


__all__ = ("CartTable", "SQLAlchemyCartStore")
