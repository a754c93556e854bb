from functools import lru_cache
from typing import Any, Protocol, runtime_checkable

from pydantic import TypeAdapter
from pydantic_core import to_json


@runtime_checkable
class Serializer(Protocol):
    """Encodes request payloads and decodes response bodies.

    ``serialize`` receives JSON-compatible values (dicts, lists and scalars)
    and ``deserialize`` turns a response body into an instance of ``shape``.
    """

    def serialize(self, value: Any) -> bytes: ...

    def deserialize(self, data: bytes, shape: Any) -> Any: ...


@lru_cache(maxsize=256)
def _adapter(shape: Any) -> TypeAdapter:
    return TypeAdapter(shape)


class JsonSerializer:
    """JSON serializer backed by pydantic."""

    def serialize(self, value: Any) -> bytes:
        return to_json(value)

    def deserialize(self, data: bytes, shape: Any) -> Any:
        return _adapter(shape).validate_json(data)

    def __repr__(self) -> str:
        return "JsonSerializer()"
