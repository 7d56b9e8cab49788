"""
Domain handlers behind the HTTP routes.

Each handler takes the input produced by a request model's to_domain()
and returns a Result the response model turns into a body.
"""

from __future__ import annotations

from collections.abc import Sequence

from kungfu import Result, Ok, Error

from storefront import promotions as P
from storefront._logging import get_logger
from storefront.api._models import (
    AddToCartInput,
    ApiError,
    ApplyPromoInput,
    PlaceOrderInput,
    QuoteInput,
    UpdateCartInput,
)
from storefront.cart import CartError, CartState
from storefront.checkout import CheckoutError, CheckoutRequest, CheckoutService
from storefront.orders import Order
from storefront.pricing import OrderTotals
from storefront.shipping import Carrier, DEFAULT_CARRIERS, ShippingOption, find_option, shipping_options

log = get_logger(__name__)

_CHECKOUT_STATUS = {
    "EMPTY_CART": 400,
    "NO_SHIPPING_OPTION": 400,
    "PROMOTION_INVALID": 422,
    "PAYMENT_FAILED": 402,
    "DUPLICATE_SUBMISSION": 409,
}


def rejection_error(
    rejection: P.PromotionRejection,
    promotion: P.Promotion | None,
    currency: str,
) -> ApiError:
    return ApiError(rejection.name, rejection.message(promotion, currency), 422)


def checkout_error(err: CheckoutError) -> ApiError:
    return ApiError(err.code, err.message, _CHECKOUT_STATUS.get(err.code, 500))


def cart_error(err: CartError) -> ApiError:
    return ApiError("INVALID_QUANTITY", str(err), 400)


class StorefrontHandlers:
    """Bind the checkout service (and carrier data) to route handlers."""

    def __init__(
        self,
        service: CheckoutService,
        carriers: Sequence[Carrier] = DEFAULT_CARRIERS,
    ) -> None:
        self.service = service
        self.carriers = tuple(carriers)

    async def cart(self, cart_key: str) -> Result[CartState, ApiError]:
        return Ok(await self.service.get_cart(cart_key))

    async def add_to_cart(self, cmd: AddToCartInput) -> Result[CartState, ApiError]:
        match await self.service.add_to_cart(cmd.cart_key, cmd.product, cmd.quantity, cmd.variation_id):
            case Ok(state):
                return Ok(state)
            case Error(e):
                return Error(cart_error(e))

    async def update_cart(self, cmd: UpdateCartInput) -> Result[CartState, ApiError]:
        match await self.service.update_cart_quantity(cmd.cart_key, cmd.product_id, cmd.quantity, cmd.variation_id):
            case Ok(state):
                return Ok(state)
            case Error(e):
                return Error(cart_error(e))

    async def quote(self, cmd: QuoteInput) -> Result[OrderTotals, ApiError]:
        promotion = None
        if cmd.promo_code:
            candidates = await self.service.promotions.list()
            match P.apply_promo_code(cmd.promo_code, candidates, cmd.lines, cmd.currency, self.service.now(), cmd.wholesale):
                case Ok(found):
                    promotion = found
                case Error(rejection):
                    return Error(rejection_error(rejection, P.find_by_code(cmd.promo_code, candidates), cmd.currency))

        return Ok(self.service.quote(
            cmd.lines,
            cmd.currency,
            cmd.country,
            promotion,
            cmd.shipping_cost,
            wholesale=cmd.wholesale,
        ))

    async def apply_promo(self, cmd: ApplyPromoInput) -> Result[P.Promotion, ApiError]:
        match await self.service.apply_promo_code(cmd.cart_key, cmd.code, cmd.currency, wholesale=cmd.wholesale):
            case Ok(promotion):
                return Ok(promotion)
            case Error(rejection):
                candidates = await self.service.promotions.list()
                return Error(rejection_error(rejection, P.find_by_code(cmd.code, candidates), cmd.currency))

    async def checkout(self, cmd: PlaceOrderInput) -> Result[Order, ApiError]:
        option = None
        if cmd.carrier_id is not None and cmd.method is not None:
            option = find_option(cmd.address.country, cmd.carrier_id, cmd.method, self.carriers)

        request = CheckoutRequest(
            idempotency_key=cmd.idempotency_key,
            cart_key=cmd.cart_key,
            currency=cmd.currency,
            address=cmd.address,
            shipping=option,
            wholesale=cmd.wholesale,
            user_id=cmd.user_id,
        )
        match await self.service.place_order(request):
            case Ok(order):
                return Ok(order)
            case Error(err):
                return Error(checkout_error(err))

    async def shipping(self, country: str) -> Result[list[ShippingOption], ApiError]:
        return Ok(shipping_options(country, self.carriers))


__all__ = ("StorefrontHandlers", "rejection_error", "checkout_error", "cart_error")
