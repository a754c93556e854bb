from .enums import FieldRole, RequestMethod
from .errors import (
    BaseUrlMissingError,
    DeclarationError,
    DeclarestError,
    MiddlewareError,
    PathResolutionError,
    ResponseError,
    ResponseParseError,
    SerializationError,
    TransportError,
)
from .http import HTTP_SUCCESS_CODES, Request, Response

__all__ = [
    "FieldRole",
    "RequestMethod",
    "Request",
    "Response",
    "HTTP_SUCCESS_CODES",
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
