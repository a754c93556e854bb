"""Declarative REST endpoints.

An endpoint is a pydantic model whose class keywords describe the HTTP
operation and whose fields carry the data sent with it::

    class ListWidgets(Endpoint, path="shops/{shop}/widgets", response=list[Widget]):
        shop: str
        tag: Annotated[Optional[str], FieldRole.QUERY] = None

    widgets = ListWidgets(shop="main", tag="blue").execute(client)

Class keywords:
    path: Path template joined onto the client's base URL. ``{field}`` (or
        ``{self.field}``) placeholders are replaced with field values.
    method: One of :class:`RequestMethod`, or its name. Defaults to GET.
    response: Type the response body is parsed into. Omit it for endpoints
        that return nothing.
    transform: ``str -> str`` function applied to the response text before
        parsing, typically to strip an envelope around every payload.
    serializer: Request/response format, :class:`JsonSerializer` by default.

Declaration keywords are inherited, so a base class can set ``transform``
for a whole API while subclasses only declare ``path``.
"""

from typing import Any, ClassVar, Dict, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from . import _pipeline
from ._declaration import DECLARATION_OPTIONS, EndpointDeclaration, declare, merge_options
from ._utils._path import compile_path
from ._utils._request_builder import build_body, build_query, build_url
from .client import AsyncClient, Client
from .middleware import MiddleWare
from .models.errors import DeclarationError
from .models.http import Request, Response


class EndpointResult:
    """A successful response together with the endpoint that produced it.

    Lets the caller choose how to read the body: :meth:`parse` for the
    declared result type, :meth:`raw` for the bytes, or :meth:`wrap` to parse
    the body into a generic envelope model.
    """

    def __init__(self, endpoint: "Endpoint", response: Response) -> None:
        self.endpoint = endpoint
        self.response = response

    def parse(self) -> Any:
        """Parse the body into the declared result type, applying the transform."""
        return _pipeline.parse_response(self.endpoint.declaration(), self.response)

    def raw(self) -> bytes:
        return self.response.body

    def wrap(self, wrapper: Any) -> Any:
        """Parse the whole body into ``wrapper``, e.g. ``Envelope[Widget]``.

        The declared transform is not applied; ``wrapper`` is expected to
        describe the envelope itself.
        """
        if not self.response.body:
            return None
        return _pipeline.deserialize(
            self.endpoint.declaration(), self.response.body, wrapper
        )


class Endpoint(BaseModel):
    """Base class for declared endpoints. See the module documentation."""

    model_config = ConfigDict(validate_by_name=True, validate_by_alias=True)

    __endpoint__: ClassVar[Optional[EndpointDeclaration]] = None
    __endpoint_options__: ClassVar[Dict[str, Any]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        # declaration keywords are consumed in __pydantic_init_subclass__,
        # once the fields are known
        for option in DECLARATION_OPTIONS:
            kwargs.pop(option, None)
        super().__init_subclass__(**kwargs)

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        options = merge_options(cls.__endpoint_options__, kwargs)
        super().__pydantic_init_subclass__(**kwargs)

        cls.__endpoint_options__ = options
        cls.__endpoint__ = declare(cls, options) if "path" in options else None

    @classmethod
    def declaration(cls) -> EndpointDeclaration:
        if cls.__endpoint__ is None:
            raise DeclarationError(cls.__name__, "no path declared")
        return cls.__endpoint__

    def compile_path(self) -> str:
        """The path template with every placeholder substituted."""
        return compile_path(self.declaration().path, self)

    def query_string(self) -> str:
        return build_query(self, self.declaration().roles.query)

    def request_body(self) -> bytes:
        declaration = self.declaration()
        return build_body(self, declaration.roles, declaration.serializer)

    def build_url(self, base_url: str) -> str:
        return build_url(base_url, self.compile_path(), self.query_string())

    def build_request(self, base_url: str) -> Request:
        """Compile this endpoint into a request, without any middleware applied."""
        return _pipeline.build_request(self, base_url)

    def exec(
        self, client: Client, middleware: Sequence[MiddleWare] = ()
    ) -> EndpointResult:
        """Send this endpoint through ``client`` and return the validated result."""
        return EndpointResult(self, _pipeline.execute(self, client, middleware))

    def execute(self, client: Client, middleware: Sequence[MiddleWare] = ()) -> Any:
        """Send this endpoint and parse the response into the declared type."""
        return self.exec(client, middleware).parse()

    def execute_raw(
        self, client: Client, middleware: Sequence[MiddleWare] = ()
    ) -> bytes:
        """Send this endpoint and return the response body unparsed."""
        return self.exec(client, middleware).raw()

    async def aexec(
        self, client: AsyncClient, middleware: Sequence[MiddleWare] = ()
    ) -> EndpointResult:
        return EndpointResult(self, await _pipeline.aexecute(self, client, middleware))

    async def aexecute(
        self, client: AsyncClient, middleware: Sequence[MiddleWare] = ()
    ) -> Any:
        return (await self.aexec(client, middleware)).parse()

    async def aexecute_raw(
        self, client: AsyncClient, middleware: Sequence[MiddleWare] = ()
    ) -> bytes:
        return (await self.aexec(client, middleware)).raw()
