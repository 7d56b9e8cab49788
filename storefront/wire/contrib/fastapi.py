"""
FastAPI integration for storefront.wire.

    from storefront.wire.contrib import fastapi
    fapp = fastapi.from_application(app)
"""

from storefront.wire.contrib._fastapi import (
    add_endpoint_to_app,
    from_application,
    compile_to_fastapi_route,
)

__all__ = (
    "add_endpoint_to_app",
    "from_application",
    "compile_to_fastapi_route",
)
