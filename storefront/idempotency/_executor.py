"""
Idempotent execution.

    fetch record ─┬─ COMPLETED ─────────────→ cached value
                  ├─ FAILED ────────────────→ cached failure
                  ├─ PENDING ─┬─ FAIL ──────→ CONFLICT
                  │           └─ WAIT ──────→ poll → cached value | failure | TIMEOUT
                  └─ none ───→ claim (CAS) ─→ run → store outcome
                                  │            └ store fails → Ok, persisted=False
                                  └ lost the race → treated as PENDING
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from kungfu import Result, Ok, Error, LazyCoroResult

from storefront._logging import get_logger
from storefront.idempotency._types import (
    RecordState,
    IdempotencyRecord,
    IdempotencyResult,
    IdempotencyError,
)
from storefront.idempotency._store import StoreError, StoreAny
from storefront.idempotency._policy import Policy, OnPending

log = get_logger(__name__)

type Outcome[T, E] = Result[IdempotencyResult[T], IdempotencyError[E]]


@dataclass(frozen=True, slots=True)
class IdempotencySpec[K, T, E]:
    """Everything one idempotent run needs."""

    key: str
    input_value: K
    operation: Callable[[K], LazyCoroResult[T, E]]
    store: StoreAny
    policy: Policy


def _store_failure(err: StoreError, key: str) -> Error[IdempotencyError[Any]]:
    return Error(IdempotencyError.store(err.message, err.cause, key))


def _from_record[T](record: IdempotencyRecord[T, Any], key: str) -> Outcome[T, Any]:
    if record.state == RecordState.COMPLETED:
        return Ok(IdempotencyResult(value=record.value, from_cache=True, key=key))
    return Error(IdempotencyError.execution("Cached failure", record.error, key))


# ═══════════════════════════════════════════════════════════════════════════════
# Pending — another run holds the key
# ═══════════════════════════════════════════════════════════════════════════════


async def _on_pending[K, T, E](spec: IdempotencySpec[K, T, E]) -> Outcome[T, E]:
    if spec.policy.conflict_strategy == OnPending.FAIL:
        log.info("idempotency conflict", extra={"idempotency_key": spec.key})
        return Error(IdempotencyError.conflict(spec.key))

    timeout = spec.policy.pending_wait_timeout.total_seconds()
    interval = spec.policy.poll_interval.total_seconds()
    elapsed = 0.0

    while elapsed < timeout:
        await asyncio.sleep(interval)
        elapsed += interval

        match await spec.store.get(spec.key):
            case Error(err):
                return _store_failure(err, spec.key)
            case Ok(None):
                # First run failed without persisting; this caller may retry.
                return Error(IdempotencyError.execution("Operation failed while waiting", key=spec.key))
            case Ok(record):
                if record.state != RecordState.PENDING:
                    return _from_record(record, spec.key)

    return Error(IdempotencyError.timeout(spec.key))


# ═══════════════════════════════════════════════════════════════════════════════
# New — claim the key and run
# ═══════════════════════════════════════════════════════════════════════════════


async def _execute_new[K, T, E](spec: IdempotencySpec[K, T, E]) -> Outcome[T, E]:
    policy = spec.policy

    match await spec.store.set_pending(spec.key, policy.result_ttl):
        case Error(err):
            return _store_failure(err, spec.key)
        case Ok(False):
            return await _on_pending(spec)
        case Ok(_):
            pass

    try:
        result = await spec.operation(spec.input_value)
    except Exception as e:
        log.exception("idempotent operation raised", extra={"idempotency_key": spec.key})
        await spec.store.delete(spec.key)
        return Error(IdempotencyError.execution(str(e), key=spec.key))

    match result:
        case Ok(value):
            match await spec.store.set_completed(spec.key, value, policy.result_ttl):
                case Error(err):
                    # Operation already ran: still Ok, key stays pending until ttl.
                    log.error(
                        "idempotent result not recorded: %s",
                        err.message,
                        extra={"idempotency_key": spec.key},
                    )
                    return Ok(IdempotencyResult(value=value, from_cache=False, key=spec.key, persisted=False))
                case Ok(_):
                    return Ok(IdempotencyResult(value=value, from_cache=False, key=spec.key))
        case Error(err):
            if policy.persist_failed:
                await spec.store.set_failed(spec.key, err, policy.failed_result_ttl or policy.result_ttl)
            else:
                await spec.store.delete(spec.key)
            return Error(IdempotencyError.execution("Operation returned Error", err, spec.key))


# ═══════════════════════════════════════════════════════════════════════════════
# run_idempotent()
# ═══════════════════════════════════════════════════════════════════════════════


async def run_idempotent[K, T, E](spec: IdempotencySpec[K, T, E]) -> Outcome[T, E]:
    match await spec.store.get(spec.key):
        case Error(err):
            return _store_failure(err, spec.key)
        case Ok(None):
            return await _execute_new(spec)
        case Ok(record):
            if record.is_pending:
                return await _on_pending(spec)
            return _from_record(record, spec.key)


__all__ = ("IdempotencySpec", "run_idempotent")
