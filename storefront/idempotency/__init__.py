"""
Idempotency — run an operation at most once per key.

    from storefront import idempotency as I

    # Direct API
    spec = I.IdempotencySpec(
        key=f"checkout:{request.idempotency_key}",
        input_value=request,
        operation=place,
        store=I.MemoryStore(),
        policy=I.Policy().with_ttl(seconds=3600),
    )
    result = await I.run_idempotent(spec)

    # Builder API
    executor = (
        I.idempotent(place)
        .key(lambda req: f"checkout:{req.idempotency_key}")
        .store(I.MemoryStore())
        .policy(I.Policy().with_on_pending(I.FAIL))
        .build()
    )
    result = await executor.run(request)
"""

from storefront.idempotency._types import (
    RecordState,
    IdempotencyRecord,
    IdempotencyResult,
    IdempotencyError,
    IdempotencyErrorKind,
)
from storefront.idempotency._store import (
    Store,
    StoreAny,
    StoreError,
    MemoryStore,
)
from storefront.idempotency._policy import (
    OnPending,
    WAIT,
    FAIL,
    Policy,
)
from storefront.idempotency._executor import IdempotencySpec, run_idempotent
from storefront.idempotency._builder import (
    Idempotent,
    IdempotentExecutor,
    idempotent,
)
from storefront.idempotency._sqlalchemy import (
    IdempotencyMixin,
    IdempotencyRecordTable,
    SQLAlchemyStore,
)

__all__ = (
    # Types
    "RecordState",
    "IdempotencyRecord",
    "IdempotencyResult",
    "IdempotencyError",
    "IdempotencyErrorKind",
    # Store
    "Store",
    "StoreAny",
    "StoreError",
    "MemoryStore",
    # Policy
    "OnPending",
    "WAIT",
    "FAIL",
    "Policy",
    # Execution
    "IdempotencySpec",
    "run_idempotent",
    "Idempotent",
    "IdempotentExecutor",
    "idempotent",
    # SQLAlchemy
    "IdempotencyMixin",
    "IdempotencyRecordTable",
    "SQLAlchemyStore",
)
