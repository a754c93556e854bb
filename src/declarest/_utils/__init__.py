from ._fields import FieldRoles, classify_fields
from ._path import compile_path, join_url, parse_placeholders
from ._request_builder import build_body, build_query, build_url
from ._serialization import JsonSerializer, Serializer

__all__ = [
    "FieldRoles",
    "classify_fields",
    "compile_path",
    "join_url",
    "parse_placeholders",
    "build_body",
    "build_query",
    "build_url",
    "JsonSerializer",
    "Serializer",
]
