"""
Idempotency policy — behavior configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import timedelta
from enum import Enum, auto


class OnPending(Enum):
    """
    What to do when a request arrives while another with the same key runs.

    WAIT: poll until the first run finishes and return its result.
          Use when: the same client retries after a timeout.

    FAIL: return CONFLICT immediately.
          Use when: a second submission must be refused (double-click on "Pay").
    """

    WAIT = auto()
    FAIL = auto()


WAIT = OnPending.WAIT
FAIL = OnPending.FAIL


@dataclass(frozen=True, slots=True)
class Policy:
    """
    Idempotency policy configuration.

    Example:
        policy = (
            Policy()
            .with_ttl(seconds=3600)
            .with_on_pending(FAIL)
        )

    Note: Immutable — each method returns a new Policy.
    """

    result_ttl: timedelta | None = None
    conflict_strategy: OnPending = OnPending.WAIT
    pending_wait_timeout: timedelta = timedelta(seconds=30)
    poll_interval: timedelta = timedelta(milliseconds=100)
    # Failures are forgotten by default so the caller may retry.
    persist_failed: bool = False
    failed_result_ttl: timedelta | None = None

    def with_ttl(
        self,
        *,
        seconds: float | None = None,
        minutes: float | None = None,
        hours: float | None = None,
        delta: timedelta | None = None,
    ) -> Policy:
        """
        TTL for completed records; after it the key may run again.

        Example:
            .with_ttl(seconds=3600)
            .with_ttl(delta=timedelta(days=1))
        """
        if delta is not None:
            ttl_val: timedelta | None = delta
        else:
            total_seconds = (seconds or 0) + (minutes or 0) * 60 + (hours or 0) * 3600
            ttl_val = timedelta(seconds=total_seconds) if total_seconds > 0 else None
        return replace(self, result_ttl=ttl_val)

    def with_on_pending(self, strategy: OnPending) -> Policy:
        return replace(self, conflict_strategy=strategy)

    def with_wait_timeout(self, *, seconds: float | None = None, delta: timedelta | None = None) -> Policy:
        """Only applies with WAIT."""
        timeout = delta if delta else timedelta(seconds=seconds or 30)
        return replace(self, pending_wait_timeout=timeout)

    def with_poll_interval(self, *, seconds: float) -> Policy:
        return replace(self, poll_interval=timedelta(seconds=seconds))

    def with_store_failed(self, store: bool = True) -> Policy:
        """
        Keep failed records (callers get the cached failure) or delete
        them (callers may retry).
        """
        return replace(self, persist_failed=store)

    def with_failed_ttl(self, *, seconds: float | None = None, delta: timedelta | None = None) -> Policy:
        """Separate TTL for failed records; falls back to the main TTL."""
        ttl_val = delta if delta else timedelta(seconds=seconds or 0)
        return replace(self, failed_result_ttl=ttl_val if ttl_val.total_seconds() > 0 else None)


__all__ = ("OnPending", "WAIT", "FAIL", "Policy")
