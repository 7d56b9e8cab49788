from typing import Annotated, Any, TypeGuard

import fastapi
from kungfu import Result

from storefront.wire._endpoint import Application, Endpoint
from storefront.wire._types import Codec, Handler, Trigger
from storefront.wire.codecs.rrc import RequestResponseCodec
from storefront.wire.triggers.http import HTTPRouteTrigger, Path


def is_http(tc: tuple[Trigger, Codec]) -> TypeGuard[tuple[HTTPRouteTrigger, RequestResponseCodec]]:
    return isinstance(tc[0], HTTPRouteTrigger) and isinstance(tc[1], RequestResponseCodec)


def make_route_handler(
    trigger: HTTPRouteTrigger,
    req_cls: type[Any],
    resp_cls: type[Any],
    handler: Handler[Any, Any, Any],
) -> Any:
    async def _route_handler(req: Any, response: fastapi.Response) -> Any:
        domain_input = req.to_domain()
        result: Result[Any, Any] = await handler(domain_input)
        out = resp_cls.from_domain(result)
        response.status_code = getattr(out, "http_status", None) or trigger.status_code
        return out

    # GET requests carry the model in the query string.
    if trigger.method == "GET":
        req_cls = Annotated[req_cls, fastapi.Query()]  # type: ignore[assignment]

    _route_handler.__annotations__ = {
        "req": req_cls,
        "response": fastapi.Response,
        "return": resp_cls,
    }
    return _route_handler


def compile_to_fastapi_route(
    endp: Endpoint,
) -> list[tuple[str, Path, Any, type[Any]]]:  # (method, path, route_func, response_model)
    routes: list[tuple[str, Path, Any, type[Any]]] = []

    for exposure in endp.exposures:
        if not is_http(exposure):
            continue

        trigger, codec = exposure
        handler = make_route_handler(trigger, codec.request, codec.response, endp.handler)
        routes.append((trigger.method.upper(), trigger.path, handler, codec.response))

    return routes


def add_endpoint_to_app(
    app: fastapi.FastAPI,
    endp: Endpoint,
) -> None:
    for method, path, handler, response_model in compile_to_fastapi_route(endp):
        route_method = getattr(app, method.lower(), None)
        if route_method is None:
            raise ValueError(f"Unsupported HTTP method: {method}")

        route_method(path, response_model=response_model)(handler)


def from_application(app: Application, **fastapi_kwargs: Any) -> fastapi.FastAPI:
    f_app = fastapi.FastAPI(**fastapi_kwargs)

    for endp in app.endpoints:
        add_endpoint_to_app(f_app, endp)

    return f_app
