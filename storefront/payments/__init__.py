"""
Payments — gateway protocol and a simulated processor.

    from storefront import payments as PAY

    gateway = PAY.SimulatedGateway(success_rate=0.95)
    result = await gateway.charge(Decimal("10"), "GBP")
"""

from __future__ import annotations

from storefront.payments._gateway import (
    SIMULATED_METHOD,
    DECLINED_MESSAGE,
    PaymentDetails,
    PaymentError,
    PaymentGateway,
    new_transaction_id,
    SimulatedGateway,
)

__all__ = (
    "SIMULATED_METHOD",
    "DECLINED_MESSAGE",
    "PaymentDetails",
    "PaymentError",
    "PaymentGateway",
    "new_transaction_id",
    "SimulatedGateway",
)
