from logging import getLogger
from typing import Any, List, Sequence, Tuple

from httpx import QueryParams
from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from ..models.errors import SerializationError
from ._fields import FieldRoles
from ._path import join_url, quote_path
from ._serialization import Serializer

logger = getLogger(__name__)

_SCALARS = (str, int, float, bool)


def _dump(instance: BaseModel, fields: Sequence[str], target: str) -> dict[str, Any]:
    # exclude_none drops unset optionals instead of sending null markers
    try:
        return instance.model_dump(
            mode="json", include=set(fields), by_alias=True, exclude_none=True
        )
    except PydanticSerializationError as e:
        raise SerializationError(target, str(e)) from e


def build_query(instance: BaseModel, fields: Sequence[str]) -> str:
    """Encode the query fields of ``instance`` as a URL query string.

    Lists become repeated keys and their ``None`` items are skipped. The
    result has no leading ``?`` and is empty when every query field is unset.

    Raises:
        SerializationError: If a query value is a nested object.
    """
    if not fields:
        return ""

    params: List[Tuple[str, Any]] = []
    for key, value in _dump(instance, fields, "query parameters").items():
        for item in value if isinstance(value, list) else [value]:
            if item is None:
                continue
            if not isinstance(item, _SCALARS):
                raise SerializationError(
                    "query parameters",
                    f"'{key}' must be a scalar or a list of scalars, got {type(item).__name__}",
                )
            params.append((key, item))
    return str(QueryParams(params))


def build_body(instance: BaseModel, roles: FieldRoles, serializer: Serializer) -> bytes:
    """Produce the request body for ``instance``.

    A raw field's bytes are used verbatim. Otherwise the body fields are
    serialized together; an empty payload yields an empty body.
    """
    if roles.raw is not None:
        data = getattr(instance, roles.raw)
        return bytes(data) if data is not None else b""

    if not roles.body:
        return b""

    payload = _dump(instance, roles.body, "request body")
    if not payload:
        return b""

    try:
        return serializer.serialize(payload)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise SerializationError("request body", str(e)) from e


def build_url(base_url: str, path: str, query: str = "") -> str:
    """Combine the base URL, the compiled path and the query string."""
    logger.debug(f"Building endpoint url from {base_url} base URL and {path} path")

    url = join_url(base_url, quote_path(path))
    if query:
        url = f"{url}?{query}"
    return url
