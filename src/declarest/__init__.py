"""Declare REST endpoints as pydantic models and execute them over HTTP."""

from ._config import ClientConfig
from ._declaration import EndpointDeclaration
from ._utils._serialization import JsonSerializer, Serializer
from .client import AsyncClient, AsyncHttpxClient, Client, HttpxClient
from .endpoint import Endpoint, EndpointResult
from .middleware import HeadersMiddleware, MiddleWare
from .models import (
    HTTP_SUCCESS_CODES,
    BaseUrlMissingError,
    DeclarationError,
    DeclarestError,
    FieldRole,
    MiddlewareError,
    PathResolutionError,
    Request,
    RequestMethod,
    Response,
    ResponseError,
    ResponseParseError,
    SerializationError,
    TransportError,
)

__all__ = [
    "Endpoint",
    "EndpointResult",
    "EndpointDeclaration",
    "FieldRole",
    "RequestMethod",
    "Request",
    "Response",
    "HTTP_SUCCESS_CODES",
    "Client",
    "AsyncClient",
    "HttpxClient",
    "AsyncHttpxClient",
    "ClientConfig",
    "MiddleWare",
    "HeadersMiddleware",
    "Serializer",
    "JsonSerializer",
    "DeclarestError",
    "BaseUrlMissingError",
    "DeclarationError",
    "PathResolutionError",
    "SerializationError",
    "TransportError",
    "ResponseError",
    "ResponseParseError",
    "MiddlewareError",
]
