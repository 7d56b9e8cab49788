"""
Saga step creation.
"""

from __future__ import annotations

from collections.abc import Callable, Awaitable
from kungfu import LazyCoroResult
from combinators import lift as L

from storefront.saga._types import SagaStep, Compensator

# ═══════════════════════════════════════════════════════════════════════════════
# step() — Primary Constructor
# ═══════════════════════════════════════════════════════════════════════════════


def step[T, E](
    action: LazyCoroResult[T, E],
    compensate: Compensator[T] | None = None,
    name: str = "",
) -> SagaStep[T, E]:
    """
    Create a compensated saga step.

    Example:
        from storefront import saga as S

        charge = S.step(
            action=gateway.charge(totals.total, "GBP"),
            compensate=lambda details: gateway.refund(details),
            name="charge",
        )

        placed = charge.then(lambda details: S.from_async(
            lambda: orders.add(build(details)),
            on_error=lambda e: CheckoutError("ORDER_FAILED", str(e)),
            compensate=lambda order: orders.delete(order.id),
        ))
    """
    return SagaStep(action=action, compensate=compensate, name=name)


# ═══════════════════════════════════════════════════════════════════════════════
# from_async() — Create step from async callable
# ═══════════════════════════════════════════════════════════════════════════════


def from_async[T, E](
    action: Callable[[], Awaitable[T]],
    on_error: Callable[[Exception], E],
    compensate: Compensator[T] | None = None,
    name: str = "",
) -> SagaStep[T, E]:
    """
    Create step from async callable; exceptions become Error(on_error(exc)).
    """
    return SagaStep(
        action=L.catching_async(action, on_error=on_error),
        compensate=compensate,
        name=name,
    )


__all__ = ("step", "from_async")
