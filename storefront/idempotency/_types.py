"""
Idempotency records and outcomes.

A submission key moves through

    (none) ──claim──→ pending ──┬──→ completed   replayed to every later caller
                                ├──→ failed      only when failures are persisted
                                └──→ (none)      released, the key may be retried

and expires `ttl` after its last transition.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum, StrEnum, auto

# ═══════════════════════════════════════════════════════════════════════════════
# Record
# ═══════════════════════════════════════════════════════════════════════════════


class RecordState(StrEnum):
    """Stored as-is in the `idempotency_status` column."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


def _deadline(now: datetime, ttl: timedelta | None) -> datetime | None:
    return now + ttl if ttl else None


@dataclass(frozen=True, slots=True)
class IdempotencyRecord[T, E]:
    """`value` is set only when completed, `error` only when failed."""

    key: str
    state: RecordState
    value: T | None
    error: E | None
    created_at: datetime
    expires_at: datetime | None

    @classmethod
    def claim(cls, key: str, ttl: timedelta | None, now: datetime | None = None) -> IdempotencyRecord[T, E]:
        now = now or datetime.now()
        return cls(key, RecordState.PENDING, None, None, now, _deadline(now, ttl))

    def complete(self, value: T, ttl: timedelta | None, now: datetime | None = None) -> IdempotencyRecord[T, E]:
        return replace(
            self,
            state=RecordState.COMPLETED,
            value=value,
            expires_at=_deadline(now or datetime.now(), ttl),
        )

    def fail(self, error: E, ttl: timedelta | None, now: datetime | None = None) -> IdempotencyRecord[T, E]:
        return replace(
            self,
            state=RecordState.FAILED,
            error=error,
            expires_at=_deadline(now or datetime.now(), ttl),
        )

    def expired(self, now: datetime | None = None) -> bool:
        return self.expires_at is not None and (now or datetime.now()) > self.expires_at

    @property
    def is_pending(self) -> bool:
        return self.state == RecordState.PENDING

    @property
    def is_completed(self) -> bool:
        return self.state == RecordState.COMPLETED

    @property
    def is_failed(self) -> bool:
        return self.state == RecordState.FAILED


# ═══════════════════════════════════════════════════════════════════════════════
# Outcomes
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class IdempotencyResult[T]:
    """
    from_cache: replayed from an earlier run, the operation did not execute.
    persisted: the outcome reached the store. False only when the operation
    succeeded but recording it failed; the key then stays pending until
    its ttl lapses.
    """

    value: T
    from_cache: bool
    key: str
    persisted: bool = True

    @property
    def is_fresh(self) -> bool:
        return not self.from_cache


class IdempotencyErrorKind(Enum):
    CONFLICT = auto()  # Same key already in flight (FAIL policy)
    TIMEOUT = auto()  # Gave up waiting for the in-flight run (WAIT policy)
    STORE_ERROR = auto()  # Storage backend error before the operation ran
    EXECUTION = auto()  # Wrapped operation failed


@dataclass(frozen=True, slots=True)
class IdempotencyError[E]:
    """original_error holds the wrapped operation's error for EXECUTION."""

    kind: IdempotencyErrorKind
    message: str
    original_error: E | None = None
    key: str | None = None

    @classmethod
    def conflict(cls, key: str) -> IdempotencyError[E]:
        return cls(IdempotencyErrorKind.CONFLICT, f"Pending conflict: {key}", key=key)

    @classmethod
    def timeout(cls, key: str) -> IdempotencyError[E]:
        return cls(IdempotencyErrorKind.TIMEOUT, "Timeout waiting for pending operation", key=key)

    @classmethod
    def store(cls, message: str, cause: object = None, key: str | None = None) -> IdempotencyError[E]:
        return cls(IdempotencyErrorKind.STORE_ERROR, message, cause, key)  # type: ignore[arg-type]

    @classmethod
    def execution(cls, message: str, original: E | None = None, key: str | None = None) -> IdempotencyError[E]:
        return cls(IdempotencyErrorKind.EXECUTION, message, original, key)

    @property
    def is_duplicate(self) -> bool:
        return self.kind in (IdempotencyErrorKind.CONFLICT, IdempotencyErrorKind.TIMEOUT)


__all__ = (
    "RecordState",
    "IdempotencyRecord",
    "IdempotencyResult",
    "IdempotencyError",
    "IdempotencyErrorKind",
)
