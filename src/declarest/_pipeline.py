"""Executes compiled endpoints: middleware, transport, status validation, conversion."""

from logging import getLogger
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence

from opentelemetry import trace

from ._declaration import EndpointDeclaration
from ._utils._path import compile_path
from ._utils._request_builder import build_body, build_query, build_url
from ._utils.constants import (
    SPAN_ATTR_ENDPOINT,
    SPAN_ATTR_METHOD,
    SPAN_ATTR_STATUS_CODE,
    SPAN_ATTR_URL,
)
from .client import AsyncClient, Client
from .middleware import MiddleWare
from .models.errors import (
    MiddlewareError,
    ResponseError,
    ResponseParseError,
    TransportError,
)
from .models.http import Request, Response

if TYPE_CHECKING:
    from .endpoint import Endpoint

logger = getLogger(__name__)
tracer = trace.get_tracer(__name__)


def build_request(endpoint: "Endpoint", base_url: str) -> Request:
    declaration = endpoint.declaration()
    path = compile_path(declaration.path, endpoint)
    query = build_query(endpoint, declaration.roles.query)
    body = build_body(endpoint, declaration.roles, declaration.serializer)
    return Request(
        method=declaration.method,
        url=build_url(base_url, path, query),
        body=body,
    )


def _apply(
    middleware: MiddleWare, stage: str, hook: Callable[..., None], *args: Any
) -> None:
    try:
        hook(*args)
    except MiddlewareError:
        raise
    except Exception as e:
        raise MiddlewareError(type(middleware).__name__, stage, str(e)) from e


def apply_request_middleware(
    endpoint: "Endpoint", request: Request, middleware: Sequence[MiddleWare]
) -> None:
    for mw in middleware:
        _apply(mw, "request", mw.on_request, endpoint, request)


def apply_response_middleware(
    endpoint: "Endpoint", response: Response, middleware: Sequence[MiddleWare]
) -> None:
    # same order as the request path
    for mw in middleware:
        _apply(mw, "response", mw.on_response, endpoint, response)


def validate_status(response: Response) -> None:
    """Raise :class:`ResponseError` unless the status is within 200-208."""
    if response.is_success:
        return
    text = response.text
    raise ResponseError(
        response.status_code, text if text is not None else response.body
    )


def deserialize(
    declaration: EndpointDeclaration,
    body: bytes,
    shape: Any,
    content: Optional[str] = None,
) -> Any:
    """Deserialize ``body`` into ``shape`` with the endpoint's serializer.

    ``content`` is the text reported on failure; it defaults to ``body``
    decoded as UTF-8.
    """
    try:
        return declaration.serializer.deserialize(body, shape)
    except Exception as e:
        if content is None:
            try:
                content = body.decode("utf-8")
            except UnicodeDecodeError:
                content = None
        raise ResponseParseError(str(e), content) from e


def parse_response(declaration: EndpointDeclaration, response: Response) -> Any:
    """Convert a validated response into the declared result type.

    Returns ``None`` without touching the body when the endpoint declares no
    result type, or when the body is empty.
    """
    if declaration.response is None or not response.body:
        return None

    body = response.body
    if declaration.transform is not None:
        text = response.text
        if text is None:
            raise ResponseParseError("response body is not valid UTF-8")
        try:
            body = declaration.transform(text).encode("utf-8")
        except Exception as e:
            raise ResponseParseError(f"transform failed: {e}", text) from e

    # parse failures report the body as received, not the transformed text
    return deserialize(declaration, body, declaration.response, response.text)


def _record_request(span: trace.Span, endpoint: "Endpoint", request: Request) -> None:
    span.set_attribute(SPAN_ATTR_ENDPOINT, type(endpoint).__name__)
    span.set_attribute(SPAN_ATTR_METHOD, str(request.method))
    span.set_attribute(SPAN_ATTR_URL, request.url)


def execute(
    endpoint: "Endpoint", client: Client, middleware: Sequence[MiddleWare] = ()
) -> Response:
    """Run one execution and return the validated response."""
    with tracer.start_as_current_span(
        f"declarest.execute {type(endpoint).__name__}"
    ) as span:
        logger.info(f"Executing endpoint {type(endpoint).__name__}")

        request = build_request(endpoint, client.base_url)
        apply_request_middleware(endpoint, request, middleware)
        _record_request(span, endpoint, request)

        try:
            response = client.send(request)
        except TransportError:
            raise
        except Exception as e:
            raise TransportError(str(request.method), request.url, str(e)) from e
        span.set_attribute(SPAN_ATTR_STATUS_CODE, response.status_code)

        apply_response_middleware(endpoint, response, middleware)
        validate_status(response)
        return response


async def aexecute(
    endpoint: "Endpoint", client: AsyncClient, middleware: Sequence[MiddleWare] = ()
) -> Response:
    """Asyncio counterpart of :func:`execute`; only the transport call is awaited."""
    with tracer.start_as_current_span(
        f"declarest.execute {type(endpoint).__name__}"
    ) as span:
        logger.info(f"Executing endpoint {type(endpoint).__name__}")

        request = build_request(endpoint, client.base_url)
        apply_request_middleware(endpoint, request, middleware)
        _record_request(span, endpoint, request)

        try:
            response = await client.send(request)
        except TransportError:
            raise
        except Exception as e:
            raise TransportError(str(request.method), request.url, str(e)) from e
        span.set_attribute(SPAN_ATTR_STATUS_CODE, response.status_code)

        apply_response_middleware(endpoint, response, middleware)
        validate_status(response)
        return response
