"""
SQLAlchemy idempotency store.

Usage:
    session_factory, _ = await create_database(url)

    store = SQLAlchemyStore(
        session_factory,
        dump=dump_order,
        load=load_order,
    )

    executor = I.idempotent(place).key(...).store(store).build()

Claiming a key is an INSERT on a unique column: whoever commits first
wins, the loser sees IntegrityError and reports Ok(False).
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import DateTime, Integer, String, Text, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import Mapped, mapped_column

from kungfu import Result, Ok, Error

from storefront.db import Base
from storefront.idempotency._types import IdempotencyRecord, RecordState
from storefront.idempotency._store import StoreError

# ═══════════════════════════════════════════════════════════════════════════════
# Idempotency Mixin — add to a SQLAlchemy model
# ═══════════════════════════════════════════════════════════════════════════════


class IdempotencyMixin:
    """
    Columns for idempotency bookkeeping.

    - idempotency_key: unique key for deduplication
    - idempotency_status: "pending" | "completed" | "failed"
    - idempotency_value: serialized result
    - idempotency_error: error text
    - idempotency_expires_at: optional TTL
    """

    idempotency_key: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    idempotency_status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    idempotency_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    idempotency_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    idempotency_expires_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)


class IdempotencyRecordTable(Base, IdempotencyMixin):
    __tablename__ = "idempotency_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


def _expired(row: IdempotencyRecordTable) -> bool:
    return row.idempotency_expires_at is not None and datetime.now() > row.idempotency_expires_at


# ═══════════════════════════════════════════════════════════════════════════════
# SQLAlchemyStore
# ═══════════════════════════════════════════════════════════════════════════════


class SQLAlchemyStore[T]:
    """
    Idempotency store over `idempotency_records`.

    dump/load turn completed values into text and back.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        dump: Callable[[T], str] = str,
        load: Callable[[str], T] = lambda raw: raw,  # type: ignore[assignment,return-value]
    ) -> None:
        self._session_factory = session_factory
        self._dump = dump
        self._load = load

    async def _row(self, session: AsyncSession, key: str) -> IdempotencyRecordTable | None:
        stmt = select(IdempotencyRecordTable).where(IdempotencyRecordTable.idempotency_key == key)
        return (await session.execute(stmt)).scalar_one_or_none()

    async def get(self, key: str) -> Result[IdempotencyRecord[T, str] | None, StoreError]:
        try:
            async with self._session_factory() as session:
                row = await self._row(session, key)
                if row is None or _expired(row):
                    return Ok(None)
                return Ok(self._to_record(row))
        except SQLAlchemyError as e:
            return Error(StoreError(f"Failed to get: {e}", e))

    async def set_pending(self, key: str, ttl: timedelta | None) -> Result[bool, StoreError]:
        try:
            async with self._session_factory() as session:
                existing = await self._row(session, key)
                if existing is not None:
                    if not _expired(existing):
                        return Ok(False)
                    await session.delete(existing)
                    await session.flush()

                now = datetime.now()
                session.add(IdempotencyRecordTable(
                    idempotency_key=key,
                    idempotency_status=RecordState.PENDING.value,
                    idempotency_expires_at=now + ttl if ttl else None,
                    created_at=now,
                ))
                try:
                    await session.commit()
                except IntegrityError:
                    await session.rollback()
                    return Ok(False)
                return Ok(True)
        except SQLAlchemyError as e:
            return Error(StoreError(f"Failed to set pending: {e}", e))

    async def set_completed(self, key: str, value: T, ttl: timedelta | None) -> Result[None, StoreError]:
        try:
            async with self._session_factory() as session:
                row = await self._row(session, key)
                if row is None:
                    return Error(StoreError(f"Record not found: {key}"))

                row.idempotency_status = RecordState.COMPLETED.value
                row.idempotency_value = self._dump(value)
                row.idempotency_expires_at = datetime.now() + ttl if ttl else None
                await session.commit()
                return Ok(None)
        except SQLAlchemyError as e:
            return Error(StoreError(f"Failed to complete: {e}", e))

    async def set_failed(self, key: str, error: Any, ttl: timedelta | None) -> Result[None, StoreError]:
        try:
            async with self._session_factory() as session:
                row = await self._row(session, key)
                if row is None:
                    return Error(StoreError(f"Record not found: {key}"))

                row.idempotency_status = RecordState.FAILED.value
                row.idempotency_error = str(error)
                row.idempotency_expires_at = datetime.now() + ttl if ttl else None
                await session.commit()
                return Ok(None)
        except SQLAlchemyError as e:
            return Error(StoreError(f"Failed to fail: {e}", e))

    async def delete(self, key: str) -> Result[bool, StoreError]:
        try:
            async with self._session_factory() as session:
                row = await self._row(session, key)
                if row is None:
                    return Ok(False)
                await session.delete(row)
                await session.commit()
                return Ok(True)
        except SQLAlchemyError as e:
            return Error(StoreError(f"Failed to delete: {e}", e))

    def _to_record(self, row: IdempotencyRecordTable) -> IdempotencyRecord[T, str]:
        state = RecordState(row.idempotency_status)
        value = None
        if state == RecordState.COMPLETED and row.idempotency_value is not None:
            value = self._load(row.idempotency_value)
        return IdempotencyRecord(
            key=row.idempotency_key,
            state=state,
            value=value,
            error=row.idempotency_error,
            created_at=row.created_at,
            expires_at=row.idempotency_expires_at,
        )


__all__ = (
    "IdempotencyMixin",
    "IdempotencyRecordTable",
    "SQLAlchemyStore",
)
