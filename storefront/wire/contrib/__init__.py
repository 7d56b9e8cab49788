"""
Contrib — framework integrations. Access integrations via submodules.

    from storefront.wire.contrib import fastapi
    app = fastapi.from_application(Application())
"""

from storefront.wire.contrib import fastapi

__all__ = ("fastapi",)
