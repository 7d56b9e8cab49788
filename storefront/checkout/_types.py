"""
Checkout request / error types.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.orders import ShippingAddress
from storefront.promotions import PromotionRejection
from storefront.shipping import ShippingOption


@dataclass(frozen=True, slots=True)
class CheckoutRequest:
    """
    One "Place order" submission.

    idempotency_key: chosen by the client per submission; resubmitting the
    same key never charges twice.
    """

    idempotency_key: str
    cart_key: str
    currency: str
    address: ShippingAddress
    shipping: ShippingOption | None
    wholesale: bool = False
    user_id: int | None = None


@dataclass(frozen=True, slots=True)
class CheckoutError:
    code: str
    message: str
    rejection: PromotionRejection | None = None


class CheckoutErrors:
    @staticmethod
    def empty_cart() -> CheckoutError:
        return CheckoutError("EMPTY_CART", "Your cart is empty.")

    @staticmethod
    def no_shipping_option() -> CheckoutError:
        return CheckoutError("NO_SHIPPING_OPTION", "Please choose a shipping option.")

    @staticmethod
    def promotion_invalid(rejection: PromotionRejection, message: str) -> CheckoutError:
        return CheckoutError("PROMOTION_INVALID", message, rejection)

    @staticmethod
    def payment_failed(message: str) -> CheckoutError:
        return CheckoutError("PAYMENT_FAILED", message)

    @staticmethod
    def order_failed(message: str) -> CheckoutError:
        return CheckoutError("ORDER_FAILED", message)

    @staticmethod
    def promotion_usage_failed(message: str) -> CheckoutError:
        return CheckoutError("PROMOTION_USAGE_FAILED", message)

    @staticmethod
    def ledger_failed(message: str) -> CheckoutError:
        return CheckoutError("LEDGER_FAILED", message)

    @staticmethod
    def duplicate_submission() -> CheckoutError:
        return CheckoutError("DUPLICATE_SUBMISSION", "This order is already being processed.")

    @staticmethod
    def idempotency_failed(message: str) -> CheckoutError:
        return CheckoutError("IDEMPOTENCY_FAILED", message)


__all__ = ("CheckoutRequest", "CheckoutError", "CheckoutErrors")
