from datetime import date
from decimal import Decimal

import pytest

from storefront import cart as K
from storefront.checkout import CheckoutRequest, CheckoutService
from storefront.ledger import SellerLedger
from storefront.orders import MemoryOrderRepository, ShippingAddress
from storefront.payments import SimulatedGateway
from storefront.promotions import (
    FixedAmountOff,
    FreeShipping,
    MemoryPromotionRepository,
    PercentageOff,
    Promotion,
    TargetedPercentageOff,
)
from storefront.shipping import find_option

from helpers import NOW


def _product(
    product_id: int = 1,
    gbp: str = "50",
    category: str = "Wands",
    seller_id: int | None = 7,
    trade_gbp: str | None = None,
) -> K.ProductSnapshot:
    return K.ProductSnapshot(
        id=product_id,
        sub_category=category,
        pricing={"GBP": Decimal(gbp), "USD": Decimal(gbp) * 2},
        trade_pricing={"GBP": Decimal(trade_gbp)} if trade_gbp is not None else None,
        seller_id=seller_id,
        name=f"Product {product_id}",
    )


@pytest.fixture
def make_product():
    return _product


@pytest.fixture
def wand() -> K.ProductSnapshot:
    return _product(1, "50", "Wands", seller_id=7)


@pytest.fixture
def cloak() -> K.ProductSnapshot:
    return _product(2, "25", "Robes", seller_id=8)


@pytest.fixture
def hundred_pound_cart(wand) -> K.CartState:
    """Two wands at 50 GBP: subtotal 100."""
    return K.add_item(K.EMPTY_CART, wand, 2)


@pytest.fixture
def promotions() -> list[Promotion]:
    return [
        Promotion(1, "SAVE10", PercentageOff(Decimal("10")), min_spend=Decimal("50")),
        Promotion(2, "FREESHIP", FreeShipping()),
        Promotion(3, "BIGSPEND", PercentageOff(Decimal("10")), min_spend=Decimal("200")),
        Promotion(4, "FIVEOFF", FixedAmountOff(Decimal("5"))),
        Promotion(5, "WANDS20", TargetedPercentageOff(Decimal("20")), applicable_category="Wands"),
        Promotion(
            6, "EXPIRED", PercentageOff(Decimal("50")),
            starts_on=date(2026, 1, 1), ends_on=date(2026, 1, 31),
        ),
        Promotion(7, "ONCE", FixedAmountOff(Decimal("1")), usage_count=1, max_usage=1),
    ]


@pytest.fixture
def address() -> ShippingAddress:
    return ShippingAddress(
        name="Hermione Granger",
        line1="8 Heathgate",
        city="London",
        postcode="NW11 7AR",
        country="GB",
    )


@pytest.fixture
def gateway() -> SimulatedGateway:
    return SimulatedGateway(success_rate=1.0, delay=0)


@pytest.fixture
def service(gateway, promotions) -> CheckoutService:
    return CheckoutService(
        gateway=gateway,
        orders=MemoryOrderRepository(),
        promotions=MemoryPromotionRepository(promotions),
        carts=K.MemoryCartStore(),
        ledger=SellerLedger(),
        clock=lambda: NOW,
    )


@pytest.fixture
def request_for(address):
    def make(key: str = "submit-1", cart_key: str = "cart_42", country: str = "GB") -> CheckoutRequest:
        return CheckoutRequest(
            idempotency_key=key,
            cart_key=cart_key,
            currency="GBP",
            address=address,
            shipping=find_option(country, "owl-post", "Standard"),
            user_id=42,
        )

    return make
