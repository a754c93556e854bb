import re
import string
from enum import Enum
from typing import List
from urllib.parse import quote

from pydantic import BaseModel

from ..models.errors import PathResolutionError

_formatter = string.Formatter()

_SELF_PREFIX = "self."
_ROOT_NAME = re.compile(r"[^.\[]*")
_SLASH_RUN = re.compile(r"/{2,}")
# RFC 3986 pchar characters that may stay unescaped inside a path segment
_SEGMENT_SAFE = "!$&'()*+,;=:@-._~"


def parse_placeholders(template: str) -> List[str]:
    """Return the expression of every ``{...}`` placeholder in ``template``.

    Doubled braces (``{{`` and ``}}``) are literal braces, as in ``str.format``.

    Raises:
        ValueError: If the template has unbalanced braces or an empty placeholder.
    """
    expressions = []
    for _, expression, _, _ in _formatter.parse(template):
        if expression is None:
            continue
        if not expression.strip():
            raise ValueError("placeholders must name a field, found '{}'")
        expressions.append(expression)
    return expressions


def placeholder_root(expression: str) -> str:
    """Name of the field a placeholder expression reads from.

    ``"self.owner.name"`` and ``"owner.name"`` both resolve to ``"owner"``.
    """
    if expression.startswith(_SELF_PREFIX):
        expression = expression[len(_SELF_PREFIX) :]
    match = _ROOT_NAME.match(expression)
    return match.group(0) if match else expression


def compile_path(template: str, instance: BaseModel) -> str:
    """Substitute every placeholder in ``template`` with the instance's field values.

    A placeholder is ``{[self.]field[.attr|[index]...][!conversion][:format_spec]}``.
    Values are rendered with their natural string form; enum members render
    as their value.

    Raises:
        PathResolutionError: If a placeholder names a field that does not exist
            or its attribute chain cannot be followed.
    """
    fields = type(instance).model_fields
    parts: List[str] = []
    for literal, expression, format_spec, conversion in _formatter.parse(template):
        parts.append(literal)
        if expression is None:
            continue

        root = placeholder_root(expression)
        if root not in fields:
            raise PathResolutionError(
                template,
                expression,
                f"'{root}' is not a field of {type(instance).__name__}",
            )

        lookup = expression
        if lookup.startswith(_SELF_PREFIX):
            lookup = lookup[len(_SELF_PREFIX) :]
        try:
            value, _ = _formatter.get_field(lookup, (), {root: getattr(instance, root)})
            if isinstance(value, Enum) and conversion is None:
                value = value.value
            value = _formatter.convert_field(value, conversion)
            parts.append(_formatter.format_field(value, format_spec or ""))
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            raise PathResolutionError(template, expression, str(e)) from e
    return "".join(parts)


def quote_path(path: str) -> str:
    """Percent-encode each ``/``-separated segment of ``path``."""
    return "/".join(quote(segment, safe=_SEGMENT_SAFE) for segment in path.split("/"))


def join_url(base_url: str, path: str) -> str:
    """Join ``path`` onto ``base_url`` with exactly one separating slash.

    Runs of slashes inside ``path`` collapse to one. An empty path (or one
    made only of slashes) leaves the base URL unchanged.
    """
    if not path.strip("/"):
        return base_url
    path = _SLASH_RUN.sub("/", path)
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"
