"""
Checkout service — quote, apply a code, place an order.

place_order() is one idempotent unit per submission key and, inside it, a
saga whose steps undo each other on failure:

    charge payment      ↺ refund
    persist order       ↺ delete order
    count promo usage   ↺ release usage
    post seller ledger  ↺ reverse entries

The cart is cleared only once all four succeeded.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date, datetime
from decimal import Decimal

from kungfu import Result, Ok, Error, LazyCoroResult

from storefront import idempotency as I
from storefront import saga as S
from storefront._logging import get_logger
from storefront.cart import (
    EMPTY_CART,
    CartError,
    CartLine,
    CartState,
    CartStore,
    ProductSnapshot,
    add_item,
    remove_item,
    update_quantity,
    with_promo_code,
)
from storefront.config import Settings
from storefront.ledger import SellerLedger
from storefront.orders import Order, OrderRepository, build_order, new_order_id
from storefront.payments import PaymentDetails, PaymentGateway
from storefront.pricing import (
    DEFAULT_POLICY,
    OrderTotals,
    PricingPolicy,
    SellerSettlement,
    TaxRateTable,
    compute_order_totals,
    split_by_seller,
)
from storefront import promotions as P
from storefront.promotions import Promotion, PromotionRejection, PromotionRepository
from storefront.checkout._types import CheckoutError, CheckoutErrors, CheckoutRequest

log = get_logger(__name__)

DEFAULT_IDEMPOTENCY_POLICY = I.Policy().with_ttl(hours=1).with_on_pending(I.FAIL)


class CheckoutService:
    """
    Example:
        service = CheckoutService(
            gateway=SimulatedGateway(),
            orders=MemoryOrderRepository(),
            promotions=MemoryPromotionRepository(promos),
            carts=MemoryCartStore(),
        )

        match await service.place_order(request):
            case Ok(order):
                order.id
            case Error(e):
                e.code, e.message
    """

    def __init__(
        self,
        gateway: PaymentGateway,
        orders: OrderRepository,
        promotions: PromotionRepository,
        carts: CartStore,
        ledger: SellerLedger | None = None,
        idempotency_store: I.StoreAny | None = None,
        policy: PricingPolicy = DEFAULT_POLICY,
        idempotency_policy: I.Policy = DEFAULT_IDEMPOTENCY_POLICY,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.gateway = gateway
        self.orders = orders
        self.promotions = promotions
        self.carts = carts
        self.ledger = ledger if ledger is not None else SellerLedger()
        self.policy = policy
        self._clock = clock
        self._placement = (
            I.idempotent(self._place)
            .key(lambda request: f"checkout:{request.idempotency_key}")
            .store(idempotency_store if idempotency_store is not None else I.MemoryStore())
            .policy(idempotency_policy)
            .build()
        )

    @classmethod
    def from_settings(cls, settings: Settings, **collaborators) -> CheckoutService:
        collaborators.setdefault("policy", PricingPolicy.from_settings(settings))
        collaborators.setdefault(
            "idempotency_policy",
            I.Policy().with_ttl(seconds=settings.idempotency_ttl_seconds).with_on_pending(I.FAIL),
        )
        return cls(**collaborators)

    def now(self) -> datetime:
        return self._clock()

    # ═══════════════════════════════════════════════════════════════════════════
    # Quote
    # ═══════════════════════════════════════════════════════════════════════════

    def quote(
        self,
        lines: Sequence[CartLine],
        currency: str,
        country: str,
        promotion: Promotion | None = None,
        shipping_cost: Decimal | None = None,
        tax_rates: TaxRateTable | None = None,
        wholesale: bool = False,
    ) -> OrderTotals:
        return compute_order_totals(
            lines,
            currency.upper(),
            country,
            promotion,
            shipping_cost,
            tax_rates if tax_rates is not None else self.policy.tax_rates,
            wholesale,
            policy=self.policy,
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # Cart
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_cart(self, cart_key: str) -> CartState:
        return await self.carts.load(cart_key) or EMPTY_CART

    async def add_to_cart(
        self,
        cart_key: str,
        product: ProductSnapshot,
        quantity: int = 1,
        variation_id: int | None = None,
    ) -> Result[CartState, CartError]:
        """Merge `quantity` into the stored cart; a bad quantity leaves it untouched."""
        state = await self.get_cart(cart_key)
        try:
            updated = add_item(state, product, quantity, variation_id)
        except CartError as e:
            return Error(e)
        await self.carts.save(cart_key, updated)
        return Ok(updated)

    async def update_cart_quantity(
        self,
        cart_key: str,
        product_id: int,
        quantity: int,
        variation_id: int | None = None,
    ) -> Result[CartState, CartError]:
        """Zero or less removes the line."""
        state = await self.get_cart(cart_key)
        try:
            updated = update_quantity(state, product_id, quantity, variation_id)
        except CartError as e:
            return Error(e)
        await self.carts.save(cart_key, updated)
        return Ok(updated)

    async def remove_from_cart(
        self,
        cart_key: str,
        product_id: int,
        variation_id: int | None = None,
    ) -> CartState:
        updated = remove_item(await self.get_cart(cart_key), product_id, variation_id)
        await self.carts.save(cart_key, updated)
        return updated

    # ═══════════════════════════════════════════════════════════════════════════
    # Promotion codes
    # ═══════════════════════════════════════════════════════════════════════════

    async def resolve_cart_promotion(
        self,
        state: CartState,
        currency: str,
        now: date | datetime,
        wholesale: bool = False,
    ) -> Result[Promotion | None, PromotionRejection]:
        """The cart's promotion re-validated now; Ok(None) when it has none."""
        if not state.promo_code:
            return Ok(None)
        candidates = await self.promotions.list()
        return P.apply_promo_code(state.promo_code, candidates, state.lines, currency.upper(), now, wholesale)

    async def apply_promo_code(
        self,
        cart_key: str,
        code: str,
        currency: str,
        now: date | datetime | None = None,
        wholesale: bool = False,
    ) -> Result[Promotion, PromotionRejection]:
        """
        Validate `code` against the stored cart and remember it there.

        A rejected code leaves the cart with no promotion.
        """
        state = await self.carts.load(cart_key) or EMPTY_CART
        candidates = await self.promotions.list()
        result = P.apply_promo_code(code, candidates, state.lines, currency.upper(), now or self.now(), wholesale)

        match result:
            case Ok(promotion):
                await self.carts.save(cart_key, with_promo_code(state, promotion.code))
                log.info("promotion applied", extra={"cart_key": cart_key, "code": promotion.code})
            case Error(rejection):
                if state.promo_code is not None:
                    await self.carts.save(cart_key, with_promo_code(state, None))
                log.info("promotion rejected", extra={"cart_key": cart_key, "reason": rejection.value})
        return result

    async def remove_promo_code(self, cart_key: str) -> None:
        state = await self.carts.load(cart_key)
        if state is not None and state.promo_code is not None:
            await self.carts.save(cart_key, with_promo_code(state, None))

    # ═══════════════════════════════════════════════════════════════════════════
    # Place order
    # ═══════════════════════════════════════════════════════════════════════════

    async def place_order(self, request: CheckoutRequest) -> Result[Order, CheckoutError]:
        """
        Charge and record one order for the cart behind `request.cart_key`.

        Resubmitting a key that already succeeded returns the same order
        without charging again; resubmitting while it is still running
        fails with DUPLICATE_SUBMISSION.
        """
        if request.shipping is None:
            return Error(CheckoutErrors.no_shipping_option())

        match await self._placement.run(request):
            case Ok(placed):
                if placed.is_fresh:
                    await self.carts.delete(request.cart_key)
                return Ok(placed.value)
            case Error(err):
                return Error(self._checkout_error(err))

    def _checkout_error(self, err: I.IdempotencyError[CheckoutError]) -> CheckoutError:
        if err.is_duplicate:
            return CheckoutErrors.duplicate_submission()
        match err.kind:
            case I.IdempotencyErrorKind.EXECUTION if isinstance(err.original_error, CheckoutError):
                return err.original_error
            case I.IdempotencyErrorKind.EXECUTION:
                return CheckoutErrors.order_failed(err.message)
            case _:
                return CheckoutErrors.idempotency_failed(err.message)

    def _place(self, request: CheckoutRequest) -> LazyCoroResult[Order, CheckoutError]:
        async def execute() -> Result[Order, CheckoutError]:
            state = await self.carts.load(request.cart_key) or EMPTY_CART
            if state.is_empty:
                return Error(CheckoutErrors.empty_cart())

            now = self.now()
            currency = request.currency.upper()

            match await self.resolve_cart_promotion(state, currency, now, request.wholesale):
                case Ok(found):
                    promotion = found
                case Error(rejection):
                    stale = P.find_by_code(state.promo_code or "", await self.promotions.list())
                    return Error(CheckoutErrors.promotion_invalid(
                        rejection, rejection.message(stale, currency),
                    ))

            totals = self.quote(
                state.lines,
                currency,
                request.address.country,
                promotion,
                request.shipping.cost if request.shipping is not None else None,
                wholesale=request.wholesale,
            )
            settlements = split_by_seller(state.lines, currency, request.wholesale, self.policy)
            order_id = new_order_id(now)

            def make_order(payment: PaymentDetails) -> Order:
                return build_order(
                    order_id,
                    state.lines,
                    request.address,
                    payment,
                    currency,
                    totals,
                    promotion,
                    request.shipping,
                    now,
                    user_id=request.user_id,
                )

            saga = (
                S.step(
                    self._charge(totals.total, currency),
                    compensate=self.gateway.refund,
                    name="charge",
                )
                .then(lambda payment: S.from_async(
                    lambda: self.orders.add(make_order(payment)),
                    on_error=lambda e: CheckoutErrors.order_failed(str(e)),
                    compensate=lambda order: self.orders.delete(order.id),
                    name="order",
                ))
                .then(lambda order: S.from_async(
                    lambda: self._record_usage(order, promotion),
                    on_error=self._usage_error,
                    compensate=(lambda _: self.promotions.decrement_usage(promotion.id)) if promotion else None,
                    name="promotion_usage",
                ))
                .then(lambda order: S.from_async(
                    lambda: self._post_ledger(order, settlements),
                    on_error=lambda e: CheckoutErrors.ledger_failed(str(e)),
                    compensate=lambda placed: self.ledger.reverse(placed.id),
                    name="ledger",
                ))
            )

            match await S.run(saga):
                case Ok(done):
                    log.info(
                        "order placed",
                        extra={"order_id": done.value.id, "total": str(totals.total), "currency": currency},
                    )
                    return Ok(done.value)
                case Error(failed):
                    log.warning(
                        "checkout failed at step %d: %s",
                        failed.step_failed,
                        failed.error.code,
                        extra={
                            "order_id": order_id,
                            "rollback_complete": failed.rollback_complete,
                            "compensators_failed": failed.compensators_failed,
                        },
                    )
                    return Error(failed.error)

        return LazyCoroResult(execute)

    def _charge(self, amount: Decimal, currency: str) -> LazyCoroResult[PaymentDetails, CheckoutError]:
        async def execute() -> Result[PaymentDetails, CheckoutError]:
            match await self.gateway.charge(amount, currency):
                case Ok(details):
                    return Ok(details)
                case Error(e):
                    return Error(CheckoutErrors.payment_failed(e.message))

        return LazyCoroResult(execute)

    async def _record_usage(self, order: Order, promotion: Promotion | None) -> Order:
        if promotion is not None:
            await self.promotions.increment_usage(promotion.id)
        return order

    @staticmethod
    def _usage_error(e: Exception) -> CheckoutError:
        if isinstance(e, P.PromotionExhausted):
            rejection = PromotionRejection.NOT_VALID
            return CheckoutErrors.promotion_invalid(rejection, rejection.message(e.promotion))
        return CheckoutErrors.promotion_usage_failed(str(e))

    async def _post_ledger(self, order: Order, settlements: tuple[SellerSettlement, ...]) -> Order:
        await self.ledger.post_sale(order.id, order.currency, settlements, order.created_at)
        return order


__all__ = ("DEFAULT_IDEMPOTENCY_POLICY", "CheckoutService")
