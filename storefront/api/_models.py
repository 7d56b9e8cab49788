"""
HTTP models — pydantic request/response bodies.

Requests implement to_domain(); responses implement from_domain(result).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from kungfu import Result, Ok, Error
from pydantic import BaseModel, Field, PrivateAttr

from storefront.cart import CartLine, CartState, ProductSnapshot, item_count
from storefront.orders import Order, ShippingAddress
from storefront.pricing import OrderTotals
from storefront.promotions import (
    FixedAmountOff,
    FreeShipping,
    PercentageOff,
    Promotion,
    TargetedPercentageOff,
)
from storefront.shipping import ShippingOption

# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ApiError:
    """Handler-level failure carried to the response models."""

    code: str
    message: str
    status: int = 400


class ErrorBody(BaseModel):
    code: str
    message: str


class _Envelope(BaseModel):
    """ok + error, plus the HTTP status the compiler should use."""

    ok: bool = True
    error: ErrorBody | None = None

    _status: int | None = PrivateAttr(default=None)

    @property
    def http_status(self) -> int | None:
        return self._status

    @classmethod
    def failed(cls, err: ApiError):
        out = cls(ok=False, error=ErrorBody(code=err.code, message=err.message))
        out._status = err.status
        return out


# ═══════════════════════════════════════════════════════════════════════════════
# Shared parts
# ═══════════════════════════════════════════════════════════════════════════════


class ProductModel(BaseModel):
    id: int
    sub_category: str
    name: str = ""
    pricing: dict[str, Decimal] = Field(default_factory=dict)
    trade_pricing: dict[str, Decimal] | None = None
    seller_id: int | None = None

    def to_domain(self) -> ProductSnapshot:
        return ProductSnapshot(
            id=self.id,
            sub_category=self.sub_category,
            pricing={k.upper(): v for k, v in self.pricing.items()},
            trade_pricing={k.upper(): v for k, v in self.trade_pricing.items()} if self.trade_pricing else None,
            seller_id=self.seller_id,
            name=self.name,
        )


class LineModel(BaseModel):
    product: ProductModel
    quantity: int = Field(ge=1)
    variation_id: int | None = None

    def to_domain(self) -> CartLine:
        return CartLine(self.product.to_domain(), self.quantity, self.variation_id)


class PlatformFeeModel(BaseModel):
    local: Decimal
    base: Decimal


class TotalsModel(BaseModel):
    subtotal: Decimal
    discount_amount: Decimal
    shipping_cost: Decimal
    taxes: Decimal
    platform_fee: PlatformFeeModel
    total: Decimal
    seller_payout: Decimal

    @classmethod
    def of(cls, totals: OrderTotals) -> TotalsModel:
        return cls(
            subtotal=totals.subtotal,
            discount_amount=totals.discount_amount,
            shipping_cost=totals.shipping_cost,
            taxes=totals.taxes,
            platform_fee=PlatformFeeModel(local=totals.platform_fee.local, base=totals.platform_fee.base),
            total=totals.total,
            seller_payout=totals.seller_payout,
        )


class ShippingOptionModel(BaseModel):
    carrier_id: str
    carrier_name: str
    method: str
    cost: Decimal
    estimated_delivery: str

    @classmethod
    def of(cls, option: ShippingOption) -> ShippingOptionModel:
        return cls(
            carrier_id=option.carrier_id,
            carrier_name=option.carrier_name,
            method=option.method,
            cost=option.cost,
            estimated_delivery=option.estimated_delivery,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# /cart
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class AddToCartInput:
    cart_key: str
    product: ProductSnapshot
    quantity: int
    variation_id: int | None


@dataclass(frozen=True, slots=True)
class UpdateCartInput:
    cart_key: str
    product_id: int
    quantity: int
    variation_id: int | None


class CartRequest(BaseModel):
    cart_key: str = Field(min_length=1)

    def to_domain(self) -> str:
        return self.cart_key


class AddToCartRequest(BaseModel):
    cart_key: str = Field(min_length=1)
    product: ProductModel
    quantity: int = 1
    variation_id: int | None = None

    def to_domain(self) -> AddToCartInput:
        return AddToCartInput(self.cart_key, self.product.to_domain(), self.quantity, self.variation_id)


class UpdateCartRequest(BaseModel):
    """quantity of zero or less removes the line."""

    cart_key: str = Field(min_length=1)
    product_id: int
    quantity: int
    variation_id: int | None = None

    def to_domain(self) -> UpdateCartInput:
        return UpdateCartInput(self.cart_key, self.product_id, self.quantity, self.variation_id)


class CartModel(BaseModel):
    items: list[LineModel]
    promo_code: str | None = None
    item_count: int = 0

    @classmethod
    def of(cls, state: CartState) -> CartModel:
        return cls(
            items=[
                LineModel(
                    product=ProductModel(
                        id=line.product.id,
                        sub_category=line.product.sub_category,
                        name=line.product.name,
                        pricing=line.product.pricing,
                        trade_pricing=line.product.trade_pricing,
                        seller_id=line.product.seller_id,
                    ),
                    quantity=line.quantity,
                    variation_id=line.variation_id,
                )
                for line in state.lines
            ],
            promo_code=state.promo_code,
            item_count=item_count(state),
        )


class CartResponse(_Envelope):
    cart: CartModel | None = None

    @classmethod
    def from_domain(cls, result: Result[CartState, ApiError]) -> CartResponse:
        match result:
            case Ok(state):
                return cls(cart=CartModel.of(state))
            case Error(err):
                return cls.failed(err)


# ═══════════════════════════════════════════════════════════════════════════════
# POST /quote
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class QuoteInput:
    lines: tuple[CartLine, ...]
    currency: str
    country: str
    promo_code: str | None
    shipping_cost: Decimal | None
    wholesale: bool


class QuoteRequest(BaseModel):
    items: list[LineModel]
    currency: str = Field(min_length=3, max_length=3)
    country: str = Field(min_length=2, max_length=2)
    promo_code: str | None = None
    shipping_cost: Decimal | None = None
    wholesale: bool = False

    def to_domain(self) -> QuoteInput:
        return QuoteInput(
            lines=tuple(item.to_domain() for item in self.items),
            currency=self.currency.upper(),
            country=self.country.upper(),
            promo_code=self.promo_code or None,
            shipping_cost=self.shipping_cost,
            wholesale=self.wholesale,
        )


class QuoteResponse(_Envelope):
    totals: TotalsModel | None = None

    @classmethod
    def from_domain(cls, result: Result[OrderTotals, ApiError]) -> QuoteResponse:
        match result:
            case Ok(totals):
                return cls(totals=TotalsModel.of(totals))
            case Error(err):
                return cls.failed(err)


# ═══════════════════════════════════════════════════════════════════════════════
# POST /promotions/apply
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ApplyPromoInput:
    cart_key: str
    code: str
    currency: str
    wholesale: bool


class ApplyPromoRequest(BaseModel):
    cart_key: str
    code: str = Field(min_length=1)
    currency: str = Field(min_length=3, max_length=3)
    wholesale: bool = False

    def to_domain(self) -> ApplyPromoInput:
        return ApplyPromoInput(self.cart_key, self.code, self.currency.upper(), self.wholesale)


def _discount_kind(promotion: Promotion) -> tuple[str, Decimal | None]:
    match promotion.discount:
        case PercentageOff(percent):
            return "percentage", percent
        case TargetedPercentageOff(percent):
            return "targeted_percentage", percent
        case FixedAmountOff(amount):
            return "fixed_amount", amount
        case FreeShipping():
            return "free_shipping", None
    return "unknown", None


class PromotionModel(BaseModel):
    code: str
    description: str
    kind: str
    value: Decimal | None = None


class ApplyPromoResponse(_Envelope):
    promotion: PromotionModel | None = None

    @classmethod
    def from_domain(cls, result: Result[Promotion, ApiError]) -> ApplyPromoResponse:
        match result:
            case Ok(promotion):
                kind, value = _discount_kind(promotion)
                return cls(promotion=PromotionModel(
                    code=promotion.code,
                    description=promotion.description,
                    kind=kind,
                    value=value,
                ))
            case Error(err):
                return cls.failed(err)


# ═══════════════════════════════════════════════════════════════════════════════
# POST /checkout
# ═══════════════════════════════════════════════════════════════════════════════


class AddressModel(BaseModel):
    name: str
    line1: str
    line2: str = ""
    city: str
    postcode: str
    country: str = Field(min_length=2, max_length=2)

    def to_domain(self) -> ShippingAddress:
        return ShippingAddress(
            name=self.name,
            line1=self.line1,
            line2=self.line2,
            city=self.city,
            postcode=self.postcode,
            country=self.country.upper(),
        )


class ShippingChoice(BaseModel):
    carrier_id: str
    method: str


@dataclass(frozen=True, slots=True)
class PlaceOrderInput:
    idempotency_key: str
    cart_key: str
    currency: str
    address: ShippingAddress
    carrier_id: str | None
    method: str | None
    wholesale: bool
    user_id: int | None


class CheckoutRequestModel(BaseModel):
    idempotency_key: str = Field(min_length=1, max_length=200)
    cart_key: str
    currency: str = Field(min_length=3, max_length=3)
    address: AddressModel
    shipping: ShippingChoice | None = None
    wholesale: bool = False
    user_id: int | None = None

    def to_domain(self) -> PlaceOrderInput:
        return PlaceOrderInput(
            idempotency_key=self.idempotency_key,
            cart_key=self.cart_key,
            currency=self.currency.upper(),
            address=self.address.to_domain(),
            carrier_id=self.shipping.carrier_id if self.shipping else None,
            method=self.shipping.method if self.shipping else None,
            wholesale=self.wholesale,
            user_id=self.user_id,
        )


class OrderModel(BaseModel):
    id: str
    status: str
    currency: str
    transaction_id: str
    payment_method: str
    promotion_code: str | None = None
    totals: TotalsModel

    @classmethod
    def of(cls, order: Order) -> OrderModel:
        return cls(
            id=order.id,
            status=order.status.value,
            currency=order.currency,
            transaction_id=order.payment.transaction_id,
            payment_method=order.payment.method,
            promotion_code=order.promotion_code,
            totals=TotalsModel.of(order.totals),
        )


class CheckoutResponse(_Envelope):
    order: OrderModel | None = None

    @classmethod
    def from_domain(cls, result: Result[Order, ApiError]) -> CheckoutResponse:
        match result:
            case Ok(order):
                return cls(order=OrderModel.of(order))
            case Error(err):
                return cls.failed(err)


# ═══════════════════════════════════════════════════════════════════════════════
# GET /shipping/options
# ═══════════════════════════════════════════════════════════════════════════════


class ShippingOptionsRequest(BaseModel):
    country: str = Field(min_length=2, max_length=2)

    def to_domain(self) -> str:
        return self.country.upper()


class ShippingOptionsResponse(_Envelope):
    options: list[ShippingOptionModel] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, result: Result[list[ShippingOption], ApiError]) -> ShippingOptionsResponse:
        match result:
            case Ok(options):
                return cls(options=[ShippingOptionModel.of(o) for o in options])
            case Error(err):
                return cls.failed(err)


__all__ = (
    "ApiError",
    "ErrorBody",
    "ProductModel",
    "LineModel",
    "TotalsModel",
    "ShippingOptionModel",
    "AddToCartInput",
    "UpdateCartInput",
    "CartRequest",
    "AddToCartRequest",
    "UpdateCartRequest",
    "CartModel",
    "CartResponse",
    "QuoteInput",
    "QuoteRequest",
    "QuoteResponse",
    "ApplyPromoInput",
    "ApplyPromoRequest",
    "PromotionModel",
    "ApplyPromoResponse",
    "AddressModel",
    "ShippingChoice",
    "PlaceOrderInput",
    "CheckoutRequestModel",
    "OrderModel",
    "CheckoutResponse",
    "ShippingOptionsRequest",
    "ShippingOptionsResponse",
)
