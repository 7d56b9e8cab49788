"""
Saga types — core data structures.
"""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Callable, Awaitable
from kungfu import LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Compensator — Undo Action
# ═══════════════════════════════════════════════════════════════════════════════

type Compensator[T] = Callable[[T], Awaitable[object]]
"""
Receives the action's value and undoes it.

May return a kungfu Result; an Error counts as a failed compensation,
as does a raised exception.
"""

# ═══════════════════════════════════════════════════════════════════════════════
# SagaStep — Single Step with Compensation
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SagaStep[T, E]:
    """
    A single saga step: action + compensator.

    When action succeeds, compensator is recorded.
    If a later step fails, compensators run in reverse.
    """

    action: LazyCoroResult[T, E]
    compensate: Compensator[T] | None = None
    name: str = ""

    def then[U, E2](self, f: Callable[[T], SagaStep[U, E2]]) -> Then[T, U, E | E2]:
        """Chain another saga step after this one."""
        return Then(self, f)


# ═══════════════════════════════════════════════════════════════════════════════
# Then — Sequential Composition
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Then[T, U, E]:
    """
    Sequential composition (monadic bind).

    `inner` may itself be a Then, so chains grow to any length:
        S.step(a).then(f).then(g).then(h)
    """

    inner: SagaStep[T, E] | Then[object, T, E]
    f: Callable[[T], SagaStep[U, E]]

    def then[V, E2](self, g: Callable[[U], SagaStep[V, E2]]) -> Then[U, V, E | E2]:
        return Then(self, g)


type SagaExpr[T, E] = SagaStep[T, E] | Then[object, T, E]


# ═══════════════════════════════════════════════════════════════════════════════
# Result Types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SagaResult[T]:
    """Successful saga result with metadata."""

    value: T
    steps_executed: int
    compensators_recorded: int


@dataclass(frozen=True, slots=True)
class SagaError[E]:
    """Saga error with rollback status."""

    error: E
    step_failed: int
    compensators_run: int
    compensators_failed: int
    rollback_complete: bool


__all__ = (
    "Compensator",
    "SagaStep",
    "Then",
    "SagaExpr",
    "SagaResult",
    "SagaError",
)
