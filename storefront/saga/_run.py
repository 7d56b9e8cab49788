"""
Saga execution with automatic rollback.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from kungfu import Result, Ok, Error

from storefront._logging import get_logger
from storefront.saga._types import (
    SagaStep,
    SagaResult,
    SagaError,
    SagaExpr,
    Then,
    Compensator,
)

log = get_logger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Progress — shared across the whole chain
# ═══════════════════════════════════════════════════════════════════════════════

type RecordedCompensator = tuple[str, object, Compensator[object]]


@dataclass(slots=True)
class _Progress:
    steps: int = 0
    compensators: list[RecordedCompensator] = field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════════════════
# run_step() — Execute single step
# ═══════════════════════════════════════════════════════════════════════════════


async def run_step[T, E](step: SagaStep[T, E], progress: _Progress) -> Result[T, E]:
    """Execute single step, recording compensator on success."""
    progress.steps += 1
    result = await step.action
    match result:
        case Ok(value):
            if step.compensate is not None:
                progress.compensators.append((step.name, value, step.compensate))
            return Ok(value)
        case Error(e):
            log.info("saga step %d (%s) failed: %r", progress.steps, step.name or "-", e)
            return Error(e)


async def _execute[T, E](expr: SagaExpr[T, E], progress: _Progress) -> Result[T, E]:
    match expr:
        case SagaStep():
            return await run_step(expr, progress)
        case Then(inner, f):
            match await _execute(inner, progress):
                case Ok(value):
                    return await _execute(f(value), progress)
                case Error(e):
                    return Error(e)
    raise TypeError(f"not a saga expression: {expr!r}")


# ═══════════════════════════════════════════════════════════════════════════════
# run_compensators() — Rollback
# ═══════════════════════════════════════════════════════════════════════════════


async def run_compensators(compensators: list[RecordedCompensator]) -> tuple[int, int]:
    """
    Run compensators in reverse. Returns (run, failed).

    A failing compensator is logged and counted; the rest still run.
    """
    comp_run = 0
    comp_failed = 0

    for name, value, comp in reversed(compensators):
        try:
            outcome = await comp(value)
        except Exception:
            log.exception("compensation %s raised", name or "-")
            comp_failed += 1
            continue
        match outcome:
            case Error(e):
                log.error("compensation %s failed: %r", name or "-", e)
                comp_failed += 1
            case _:
                comp_run += 1

    return comp_run, comp_failed


# ═══════════════════════════════════════════════════════════════════════════════
# run() — Execute a step or a chain
# ═══════════════════════════════════════════════════════════════════════════════


async def run[T, E](saga: SagaExpr[T, E]) -> Result[SagaResult[T], SagaError[E]]:
    """
    Execute saga with automatic rollback on failure.

    On success: returns SagaResult with value and metadata.
    On failure: runs compensators in reverse, returns SagaError.

    Example:
        from storefront import saga as S

        result = await S.run(
            S.step(charge, refund)
            .then(lambda payment: S.step(save_order(payment), delete_order))
            .then(lambda order: S.step(post_ledger(order), reverse_ledger))
        )

        match result:
            case Ok(r):
                r.value
            case Error(e):
                e.step_failed, e.rollback_complete
    """
    progress = _Progress()
    result = await _execute(saga, progress)

    match result:
        case Ok(value):
            return Ok(SagaResult(
                value=value,
                steps_executed=progress.steps,
                compensators_recorded=len(progress.compensators),
            ))

        case Error(error):
            comp_run, comp_failed = await run_compensators(progress.compensators)
            if comp_failed:
                log.error(
                    "saga rollback incomplete: %d of %d compensators failed",
                    comp_failed,
                    len(progress.compensators),
                )

            return Error(SagaError(
                error=error,
                step_failed=progress.steps,
                compensators_run=comp_run,
                compensators_failed=comp_failed,
                rollback_complete=comp_failed == 0,
            ))


__all__ = ("run", "run_step", "run_compensators")
