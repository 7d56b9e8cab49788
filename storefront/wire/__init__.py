"""
Wire — expose async domain handlers via triggers and codecs.

    from storefront.wire import endpoint, Application
    from storefront.wire.triggers.http import HTTPRouteTrigger
    from storefront.wire.codecs.rrc import RequestResponseCodec

    endp = endpoint(handle_quote).expose(
        HTTPRouteTrigger("POST", "/quote"),
        RequestResponseCodec(QuoteRequest, QuoteResponse),
    )
    app = Application().mount(endp)
"""

from storefront.wire._endpoint import Endpoint, endpoint, Application
from storefront.wire._types import (
    Trigger,
    Codec,
    Exposure,
    Handler,
)

# Common codecs and triggers
from storefront.wire.codecs.rrc import RequestResponseCodec
from storefront.wire.triggers.http import (
    HTTPRouteTrigger,
    Method,
    Path,
    Header,
    Headers,
)

# Subpackages
from storefront.wire import codecs, triggers, contrib

__all__ = (
    # Core API
    "Endpoint",
    "endpoint",
    "Application",
    "Trigger",
    "Codec",
    "Exposure",
    "Handler",
    # Built-ins
    "RequestResponseCodec",
    "HTTPRouteTrigger",
    "Method",
    "Path",
    "Header",
    "Headers",
    # Subpackages
    "codecs",
    "triggers",
    "contrib",
)
