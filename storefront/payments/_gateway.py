"""
Payment gateway boundary.

Gateways return lazy results: nothing is charged until the LazyCoroResult
is awaited, so a saga step can hold the charge without running it.
"""

from __future__ import annotations

import asyncio
import random
import time
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Protocol

from kungfu import Result, Ok, Error, LazyCoroResult

from storefront._logging import get_logger

if TYPE_CHECKING:
    from storefront.config import Settings

log = get_logger(__name__)

SIMULATED_METHOD = "Simulated Card"
DECLINED_MESSAGE = "The payment processor declined the transaction."


# ═══════════════════════════════════════════════════════════════════════════════
# Types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PaymentDetails:
    """A captured payment."""

    method: str
    transaction_id: str
    amount: Decimal
    currency: str


@dataclass(frozen=True, slots=True)
class PaymentError:
    code: str
    message: str


class PaymentGateway(Protocol):
    """
    Charge / refund protocol.

    Implement this for a real processor; SimulatedGateway stands in for
    tests and local runs.
    """

    def charge(self, amount: Decimal, currency: str) -> LazyCoroResult[PaymentDetails, PaymentError]:
        ...

    def refund(self, details: PaymentDetails) -> LazyCoroResult[None, PaymentError]:
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# SimulatedGateway
# ═══════════════════════════════════════════════════════════════════════════════


def new_transaction_id() -> str:
    return f"txn_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"


class SimulatedGateway:
    """
    Gateway that approves `success_rate` of charges after `delay` seconds.

    Example:
        gateway = SimulatedGateway(success_rate=1.0, delay=0)
        match await gateway.charge(Decimal("125.99"), "GBP"):
            case Ok(details):
                details.transaction_id  # "txn_..."
            case Error(e):
                e.message
    """

    def __init__(
        self,
        success_rate: float = 0.95,
        delay: float = 0.0,
        rng: random.Random | None = None,
    ) -> None:
        self.success_rate = success_rate
        self.delay = delay
        self._rng = rng or random.Random()
        self.charges: list[PaymentDetails] = []
        self.refunds: list[PaymentDetails] = []

    @classmethod
    def from_settings(cls, settings: Settings, rng: random.Random | None = None) -> SimulatedGateway:
        return cls(
            success_rate=settings.payment_success_rate,
            delay=settings.payment_delay_seconds,
            rng=rng,
        )

    def charge(self, amount: Decimal, currency: str) -> LazyCoroResult[PaymentDetails, PaymentError]:
        async def execute() -> Result[PaymentDetails, PaymentError]:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self._rng.random() >= self.success_rate:
                log.info("payment declined", extra={"amount": str(amount), "currency": currency})
                return Error(PaymentError("DECLINED", DECLINED_MESSAGE))

            details = PaymentDetails(
                method=SIMULATED_METHOD,
                transaction_id=new_transaction_id(),
                amount=amount,
                currency=currency,
            )
            self.charges.append(details)
            log.info(
                "payment captured",
                extra={"transaction_id": details.transaction_id, "amount": str(amount), "currency": currency},
            )
            return Ok(details)

        return LazyCoroResult(execute)

    def refund(self, details: PaymentDetails) -> LazyCoroResult[None, PaymentError]:
        async def execute() -> Result[None, PaymentError]:
            if details not in self.charges:
                return Error(PaymentError("UNKNOWN_TRANSACTION", f"No charge {details.transaction_id}"))
            self.charges.remove(details)
            self.refunds.append(details)
            log.info("payment refunded", extra={"transaction_id": details.transaction_id})
            return Ok(None)

        return LazyCoroResult(execute)


__all__ = (
    "SIMULATED_METHOD",
    "DECLINED_MESSAGE",
    "PaymentDetails",
    "PaymentError",
    "PaymentGateway",
    "new_transaction_id",
    "SimulatedGateway",
)
