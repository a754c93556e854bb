from enum import Enum


class RequestMethod(str, Enum):
    """HTTP methods an endpoint may be declared with."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    def __str__(self) -> str:
        return self.value


class FieldRole(Enum):
    """Where a field of an endpoint ends up in the compiled request.

    Used as ``typing.Annotated`` metadata on endpoint fields::

        tag: Annotated[Optional[str], FieldRole.QUERY] = None

    ``PATH`` fields are only readable by the path template and are left out
    of both the query string and the body.
    """

    PATH = "path"
    QUERY = "query"
    RAW = "raw"
    BODY = "body"
