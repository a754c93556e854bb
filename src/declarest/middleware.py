from typing import TYPE_CHECKING, Mapping

from .models.http import Request, Response

if TYPE_CHECKING:
    from .endpoint import Endpoint


class MiddleWare:
    """Mutates a request before it is sent and a response before it is converted.

    Middleware passed to an execution runs in registration order on both the
    request and the response path; the response path is not reversed. Either
    hook may raise to abort the execution, which surfaces as a
    :class:`~declarest.MiddlewareError`. Override only the hooks you need.
    """

    def on_request(self, endpoint: "Endpoint", request: Request) -> None:
        pass

    def on_response(self, endpoint: "Endpoint", response: Response) -> None:
        pass


class HeadersMiddleware(MiddleWare):
    """Sets a fixed set of headers on every request, replacing earlier values."""

    def __init__(self, headers: Mapping[str, str]) -> None:
        self.headers = dict(headers)

    def on_request(self, endpoint: "Endpoint", request: Request) -> None:
        for name, value in self.headers.items():
            request.headers[name] = value
