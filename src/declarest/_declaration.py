from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Type

from pydantic import BaseModel

from ._utils._fields import FieldRoles, classify_fields
from ._utils._path import parse_placeholders, placeholder_root
from ._utils._serialization import JsonSerializer, Serializer
from .models.enums import RequestMethod
from .models.errors import DeclarationError

DECLARATION_OPTIONS = ("path", "method", "response", "transform", "serializer")


@dataclass(frozen=True)
class EndpointDeclaration:
    """Everything known about an endpoint class once it has been defined.

    Attributes:
        name: Name of the endpoint class.
        path: Path template, with ``{field}`` placeholders.
        method: HTTP method.
        response: Type the response body is parsed into, or ``None`` when the
            endpoint returns nothing.
        transform: Optional ``str -> str`` function applied to the response
            text before it is parsed.
        serializer: Encodes the request body and decodes the response body.
        roles: Role of every field.
        placeholders: Expressions of the path placeholders, in template order.
    """

    name: str
    path: str
    method: RequestMethod = RequestMethod.GET
    response: Any = None
    transform: Optional[Callable[[str], str]] = None
    serializer: Serializer = field(default_factory=JsonSerializer)
    roles: FieldRoles = field(default_factory=FieldRoles)
    placeholders: Tuple[str, ...] = ()


def _method(name: str, value: Any) -> RequestMethod:
    if isinstance(value, RequestMethod):
        return value
    try:
        return RequestMethod(str(value).upper())
    except ValueError as e:
        allowed = ", ".join(m.value for m in RequestMethod)
        raise DeclarationError(
            name, f"unsupported method '{value}', expected one of {allowed}"
        ) from e


def _response_type(value: Any) -> Any:
    # NoneType spells "no result" just like None
    return None if value is type(None) else value


def declare(model: Type[BaseModel], options: Mapping[str, Any]) -> EndpointDeclaration:
    """Validate the declaration options of ``model`` and freeze them.

    Raises:
        DeclarationError: If the path template is malformed, the method is
            unknown, the transform is not callable, the serializer does not
            implement ``serialize``/``deserialize`` or the field roles conflict.
    """
    name = model.__name__
    path = options["path"]
    if not isinstance(path, str):
        raise DeclarationError(name, "path must be a string")

    try:
        placeholders = tuple(parse_placeholders(path))
    except ValueError as e:
        raise DeclarationError(name, f"malformed path template '{path}': {e}") from e

    transform = options.get("transform")
    if transform is not None and not callable(transform):
        raise DeclarationError(name, "transform must be callable")

    serializer = options.get("serializer") or JsonSerializer()
    if not isinstance(serializer, Serializer):
        raise DeclarationError(
            name, "serializer must implement serialize() and deserialize()"
        )

    roles = classify_fields(
        name,
        model.model_fields,
        path_fields={placeholder_root(expression) for expression in placeholders},
    )

    return EndpointDeclaration(
        name=name,
        path=path,
        method=_method(name, options.get("method", RequestMethod.GET)),
        response=_response_type(options.get("response")),
        transform=transform,
        serializer=serializer,
        roles=roles,
        placeholders=placeholders,
    )


def merge_options(
    inherited: Mapping[str, Any], kwargs: Dict[str, Any]
) -> Dict[str, Any]:
    """Pop the declaration options out of ``kwargs`` and layer them over ``inherited``."""
    options = dict(inherited)
    for option in DECLARATION_OPTIONS:
        if option in kwargs:
            options[option] = kwargs.pop(option)
    return options
