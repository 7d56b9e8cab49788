"""
Codecs — convert transport payloads to domain inputs and back.

    from storefront.wire.codecs import RequestResponseCodec

    # class Request(BaseModel): implements to_domain()
    # class Response(BaseModel): implements from_domain(result)
    # codec = RequestResponseCodec(Request, Response)
"""

from storefront.wire.codecs.rrc import (
    RequestResponseCodec,
    ToDomain,
    FromDomain,
    HasStatus,
)

__all__ = (
    "RequestResponseCodec",
    "ToDomain",
    "FromDomain",
    "HasStatus",
)
