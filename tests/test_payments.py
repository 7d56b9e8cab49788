import random
from decimal import Decimal

from storefront import payments as PAY
from storefront.config import Settings

from helpers import err, ok


class FixedRandom(random.Random):
    def __init__(self, value: float) -> None:
        super().__init__()
        self.value = value

    def random(self) -> float:
        return self.value


async def test_charge_success():
    gateway = PAY.SimulatedGateway(success_rate=0.95, rng=FixedRandom(0.5))
    details = ok(await gateway.charge(Decimal("125.99"), "GBP"))
    assert details.method == PAY.SIMULATED_METHOD
    assert details.transaction_id.startswith("txn_")
    assert details.amount == Decimal("125.99")
    assert gateway.charges == [details]


async def test_charge_declined():
    gateway = PAY.SimulatedGateway(success_rate=0.95, rng=FixedRandom(0.97))
    e = err(await gateway.charge(Decimal("10"), "GBP"))
    assert e.code == "DECLINED"
    assert e.message == PAY.DECLINED_MESSAGE
    assert gateway.charges == []


async def test_charge_is_lazy():
    gateway = PAY.SimulatedGateway(success_rate=1.0)
    pending = gateway.charge(Decimal("10"), "GBP")
    assert gateway.charges == []
    ok(await pending)
    assert len(gateway.charges) == 1


async def test_refund_only_known_charges():
    gateway = PAY.SimulatedGateway(success_rate=1.0)
    details = ok(await gateway.charge(Decimal("10"), "GBP"))

    ok(await gateway.refund(details))
    assert gateway.refunds == [details]
    assert gateway.charges == []

    assert err(await gateway.refund(details)).code == "UNKNOWN_TRANSACTION"


def test_transaction_ids_are_unique():
    assert len({PAY.new_transaction_id() for _ in range(100)}) == 100


def test_gateway_from_settings():
    gateway = PAY.SimulatedGateway.from_settings(Settings(payment_success_rate=0.5, payment_delay_seconds=0))
    assert gateway.success_rate == 0.5
    assert gateway.delay == 0
