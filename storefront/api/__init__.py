"""
API — the storefront over HTTP.

    from storefront.api import create_app

    app = create_app(service)            # bring your own collaborators
    app = create_default_app()           # SQLAlchemy stores from settings

Routes:
    GET   /cart               the stored cart for ?cart_key=
    POST  /cart/items         add a product, merging with an existing line
    PATCH /cart/items         set a line quantity, zero removes it
    POST  /quote              price a list of lines
    POST  /promotions/apply   validate a code against a stored cart
    POST  /checkout           place the order (201), idempotent per key
    GET   /shipping/options   options for ?country=GB
"""

from __future__ import annotations

from storefront.api._models import ApiError
from storefront.api._handlers import StorefrontHandlers, cart_error, checkout_error, rejection_error
from storefront.api._app import build_application, create_app, create_default_app

__all__ = (
    "ApiError",
    "StorefrontHandlers",
    "cart_error",
    "checkout_error",
    "rejection_error",
    "build_application",
    "create_app",
    "create_default_app",
)
