import types
from dataclasses import dataclass
from typing import Any, Collection, Dict, Optional, Tuple, Union, get_args, get_origin

from pydantic.fields import FieldInfo

from ..models.enums import FieldRole
from ..models.errors import DeclarationError

_BYTE_TYPES = (bytes, bytearray)


@dataclass(frozen=True)
class FieldRoles:
    """The fields of an endpoint split by where they end up in the request."""

    path: Tuple[str, ...] = ()
    query: Tuple[str, ...] = ()
    body: Tuple[str, ...] = ()
    raw: Optional[str] = None

    def role_of(self, name: str) -> Optional[FieldRole]:
        if name == self.raw:
            return FieldRole.RAW
        if name in self.query:
            return FieldRole.QUERY
        if name in self.body:
            return FieldRole.BODY
        if name in self.path:
            return FieldRole.PATH
        return None


def is_byte_type(annotation: Any) -> bool:
    if annotation in _BYTE_TYPES:
        return True
    if get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        return len(args) == 1 and args[0] in _BYTE_TYPES
    return False


def _explicit_role(endpoint: str, name: str, info: FieldInfo) -> Optional[FieldRole]:
    roles = {item for item in info.metadata if isinstance(item, FieldRole)}
    if len(roles) > 1:
        found = ", ".join(sorted(role.value for role in roles))
        raise DeclarationError(endpoint, f"field '{name}' has more than one role ({found})")
    return roles.pop() if roles else None


def classify_fields(
    endpoint: str,
    fields: Dict[str, FieldInfo],
    path_fields: Collection[str] = (),
) -> FieldRoles:
    """Assign a role to every field of an endpoint.

    Untagged fields default to ``BODY``, except fields read by the path
    template, which default to ``PATH``. When a ``RAW`` field is declared the
    untagged fields are left out of the body entirely.

    Raises:
        DeclarationError: For more than one raw field, a raw field that is not
            ``bytes``, a body field declared next to a raw field, or a field
            tagged with more than one role.
    """
    explicit = {name: _explicit_role(endpoint, name, info) for name, info in fields.items()}

    raw_fields = [name for name, role in explicit.items() if role is FieldRole.RAW]
    if len(raw_fields) > 1:
        raise DeclarationError(
            endpoint, f"only one raw field is allowed, found {', '.join(raw_fields)}"
        )
    raw = raw_fields[0] if raw_fields else None

    if raw is not None:
        if not is_byte_type(fields[raw].annotation):
            raise DeclarationError(endpoint, f"raw field '{raw}' must be typed as bytes")
        body_fields = [name for name, role in explicit.items() if role is FieldRole.BODY]
        if body_fields:
            raise DeclarationError(
                endpoint,
                f"raw field '{raw}' cannot be combined with body fields ({', '.join(body_fields)})",
            )

    path, query, body = [], [], []
    for name, role in explicit.items():
        if role is None:
            if name in path_fields or raw is not None:
                role = FieldRole.PATH
            else:
                role = FieldRole.BODY

        if role is FieldRole.PATH:
            path.append(name)
        elif role is FieldRole.QUERY:
            query.append(name)
        elif role is FieldRole.BODY:
            body.append(name)

    return FieldRoles(path=tuple(path), query=tuple(query), body=tuple(body), raw=raw)
