"""
Idempotency store — typed storage protocol.

All methods return Result for explicit error handling.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Protocol

from kungfu import Result, Ok, Error

from storefront.idempotency._types import IdempotencyRecord

# ═══════════════════════════════════════════════════════════════════════════════
# Store Error
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class StoreError:
    """Storage operation error."""

    message: str
    cause: Exception | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Store Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class Store[T](Protocol):
    """
    Typed idempotency store protocol.

    Note: Generic over T — the value stored in completed records.
    """

    async def get(self, key: str) -> Result[IdempotencyRecord[T, Any] | None, StoreError]:
        """Existing, unexpired record. Ok(None) if not found."""
        ...

    async def set_pending(self, key: str, ttl: timedelta | None) -> Result[bool, StoreError]:
        """
        Atomically claim `key`.

        Ok(True) if claimed, Ok(False) if a live record already exists.
        Must be atomic (compare-and-swap).
        """
        ...

    async def set_completed(self, key: str, value: T, ttl: timedelta | None) -> Result[None, StoreError]:
        ...

    async def set_failed(self, key: str, error: Any, ttl: timedelta | None) -> Result[None, StoreError]:
        ...

    async def delete(self, key: str) -> Result[bool, StoreError]:
        """Delete record. Ok(True) if it existed."""
        ...


type StoreAny = Store[Any]


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Store — For Testing
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryStore[T]:
    """
    In-memory idempotency store.

    Single process only: no distributed lock, nothing survives a restart.
    """

    def __init__(self) -> None:
        self._records: dict[str, IdempotencyRecord[T, Any]] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Result[IdempotencyRecord[T, Any] | None, StoreError]:
        async with self._lock:
            record = self._records.get(key)
            if record is None:
                return Ok(None)
            if record.expired():
                del self._records[key]
                return Ok(None)
            return Ok(record)

    async def set_pending(self, key: str, ttl: timedelta | None) -> Result[bool, StoreError]:
        async with self._lock:
            existing = self._records.get(key)
            if existing is not None and not existing.expired():
                return Ok(False)
            self._records[key] = IdempotencyRecord.claim(key, ttl)
            return Ok(True)

    async def set_completed(self, key: str, value: T, ttl: timedelta | None) -> Result[None, StoreError]:
        async with self._lock:
            existing = self._records.get(key)
            if existing is None:
                return Error(StoreError(f"No pending record for key: {key}"))
            self._records[key] = existing.complete(value, ttl)
            return Ok(None)

    async def set_failed(self, key: str, error: Any, ttl: timedelta | None) -> Result[None, StoreError]:
        async with self._lock:
            existing = self._records.get(key)
            if existing is None:
                return Error(StoreError(f"No pending record for key: {key}"))
            self._records[key] = existing.fail(error, ttl)
            return Ok(None)

    async def delete(self, key: str) -> Result[bool, StoreError]:
        async with self._lock:
            return Ok(self._records.pop(key, None) is not None)


__all__ = ("StoreError", "Store", "StoreAny", "MemoryStore")
