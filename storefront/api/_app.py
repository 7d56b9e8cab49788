"""
Application assembly — endpoints, FastAPI app, default wiring.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

import fastapi

from storefront._logging import configure_logging, get_logger
from storefront.api._handlers import StorefrontHandlers
from storefront.api._models import (
    AddToCartRequest,
    ApplyPromoRequest,
    CartRequest,
    CartResponse,
    ApplyPromoResponse,
    CheckoutRequestModel,
    CheckoutResponse,
    QuoteRequest,
    QuoteResponse,
    ShippingOptionsRequest,
    ShippingOptionsResponse,
    UpdateCartRequest,
)
from storefront.cart import SQLAlchemyCartStore
from storefront.checkout import CheckoutService
from storefront.config import Settings, get_settings
from storefront.db import create_database
from storefront.idempotency import SQLAlchemyStore
from storefront.orders import SQLAlchemyOrderRepository, dump_order, load_order
from storefront.payments import SimulatedGateway
from storefront.promotions import MemoryPromotionRepository, Promotion
from storefront.shipping import Carrier, DEFAULT_CARRIERS
from storefront.wire import Application, HTTPRouteTrigger, RequestResponseCodec, endpoint
from storefront.wire.contrib import fastapi as wire_fastapi

log = get_logger(__name__)


def build_application(handlers: StorefrontHandlers) -> Application:
    """Storefront endpoints, transport-agnostic."""
    return Application().mount(
        endpoint(handlers.cart).expose(
            HTTPRouteTrigger("GET", "/cart"),
            RequestResponseCodec(CartRequest, CartResponse),
        ),
        endpoint(handlers.add_to_cart).expose(
            HTTPRouteTrigger("POST", "/cart/items"),
            RequestResponseCodec(AddToCartRequest, CartResponse),
        ),
        endpoint(handlers.update_cart).expose(
            HTTPRouteTrigger("PATCH", "/cart/items"),
            RequestResponseCodec(UpdateCartRequest, CartResponse),
        ),
        endpoint(handlers.quote).expose(
            HTTPRouteTrigger("POST", "/quote"),
            RequestResponseCodec(QuoteRequest, QuoteResponse),
        ),
        endpoint(handlers.apply_promo).expose(
            HTTPRouteTrigger("POST", "/promotions/apply"),
            RequestResponseCodec(ApplyPromoRequest, ApplyPromoResponse),
        ),
        endpoint(handlers.checkout).expose(
            HTTPRouteTrigger("POST", "/checkout", status_code=201),
            RequestResponseCodec(CheckoutRequestModel, CheckoutResponse),
        ),
        endpoint(handlers.shipping).expose(
            HTTPRouteTrigger("GET", "/shipping/options"),
            RequestResponseCodec(ShippingOptionsRequest, ShippingOptionsResponse),
        ),
    )


def create_app(
    service: CheckoutService,
    carriers: Sequence[Carrier] = DEFAULT_CARRIERS,
) -> fastapi.FastAPI:
    """
    FastAPI app over a ready checkout service.

    Example:
        app = create_app(CheckoutService(
            gateway=SimulatedGateway(),
            orders=MemoryOrderRepository(),
            promotions=MemoryPromotionRepository(),
            carts=MemoryCartStore(),
        ))
    """
    application = build_application(StorefrontHandlers(service, carriers))
    return wire_fastapi.from_application(application, title="storefront")


# ═══════════════════════════════════════════════════════════════════════════════
# Default wiring — SQLAlchemy stores, simulated gateway, env settings
# ═══════════════════════════════════════════════════════════════════════════════


def create_default_app(
    settings: Settings | None = None,
    promotions: Sequence[Promotion] = (),
) -> fastapi.FastAPI:
    """
    Self-contained app: tables are created on startup, engine disposed on
    shutdown.

    Run with: uvicorn --factory storefront.api:create_default_app
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, json_mode=settings.log_json)

    handlers = StorefrontHandlers(service=None, carriers=DEFAULT_CARRIERS)  # type: ignore[arg-type]

    @asynccontextmanager
    async def lifespan(_: fastapi.FastAPI) -> AsyncIterator[None]:
        session_factory, engine = await create_database(settings.database_url)
        handlers.service = CheckoutService.from_settings(
            settings,
            gateway=SimulatedGateway.from_settings(settings),
            orders=SQLAlchemyOrderRepository(session_factory),
            promotions=MemoryPromotionRepository(list(promotions)),
            carts=SQLAlchemyCartStore(session_factory),
            idempotency_store=SQLAlchemyStore(session_factory, dump=dump_order, load=load_order),
        )
        log.info("storefront started", extra={"database_url": settings.database_url})
        try:
            yield
        finally:
            await engine.dispose()

    return wire_fastapi.from_application(
        build_application(handlers),
        title="storefront",
        lifespan=lifespan,
    )


__all__ = ("build_application", "create_app", "create_default_app")
