from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Self

from storefront.wire._types import Codec, Exposure, Handler, Trigger


@dataclass(slots=True)
class Endpoint:
    """One async domain handler and every way it is exposed."""

    handler: Handler[Any, Any, Any]
    exposures: list[Exposure] = field(default_factory=list[Exposure])

    def expose(self, trigger: Trigger, codec: Codec) -> Endpoint:
        return Endpoint(
            handler=self.handler, exposures=[*self.exposures, (trigger, codec)]
        )


def endpoint(handler: Handler[Any, Any, Any]) -> Endpoint:
    return Endpoint(handler=handler)


class Application:
    """Endpoints mounted together; compiled per transport by contrib."""

    def __init__(self) -> None:
        self.endpoints: list[Endpoint] = []

    def mount(self, *endps: Endpoint) -> Self:
        self.endpoints.extend(endps)
        return self


__all__ = ("Endpoint", "endpoint", "Application")
