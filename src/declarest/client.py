"""Transports that carry compiled requests over the wire.

The pipeline only depends on :class:`Client` (blocking) and
:class:`AsyncClient` (asyncio). :class:`HttpxClient` and
:class:`AsyncHttpxClient` are the built-in implementations; any object
implementing ``base_url`` and ``send`` can be used instead, for example to
plug in another HTTP library or a test double.
"""

from abc import ABC, abstractmethod
from logging import getLogger
from typing import Optional

import httpx
from tenacity import (
    AsyncRetrying,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ._config import ClientConfig
from ._utils._ssl_context import get_httpx_client_kwargs
from .models.errors import TransportError
from .models.http import Request, Response

logger = getLogger(__name__)


def is_retryable_exception(exception: BaseException) -> bool:
    # the connection was never established, so the request was not delivered
    return isinstance(exception, (httpx.ConnectError, httpx.ConnectTimeout))


def _retry_policy(connect_retries: int) -> dict:
    return {
        "retry": retry_if_exception(is_retryable_exception),
        "stop": stop_after_attempt(connect_retries + 1),
        "wait": wait_exponential(multiplier=1, min=1, max=10),
        "reraise": True,
    }


def _to_response(response: httpx.Response) -> Response:
    return Response(
        status_code=response.status_code,
        headers=httpx.Headers(response.headers),
        body=response.content,
    )


class Client(ABC):
    """A blocking transport.

    Implementations must send the method, URL, headers and body verbatim and
    return the status code, headers and body they received. Transport level
    failures should be raised as :class:`~declarest.TransportError`.
    """

    @property
    @abstractmethod
    def base_url(self) -> str: ...

    @abstractmethod
    def send(self, request: Request) -> Response: ...


class AsyncClient(ABC):
    """An asyncio transport; same contract as :class:`Client`."""

    @property
    @abstractmethod
    def base_url(self) -> str: ...

    @abstractmethod
    async def send(self, request: Request) -> Response: ...


class HttpxClient(Client):
    """Blocking transport backed by ``httpx.Client``.

    Args:
        base_url: Base URL every endpoint path is joined onto. Falls back to
            ``DECLAREST_BASE_URL`` when omitted.
        config: Full client configuration; takes precedence over ``base_url``.
        http: An existing ``httpx.Client`` to reuse. It is not closed by
            :meth:`close`.
        connect_retries: How many times to retry a request whose connection
            could not be established. Defaults to 0, so every request is sent
            exactly once.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        config: Optional[ClientConfig] = None,
        http: Optional[httpx.Client] = None,
        connect_retries: int = 0,
    ) -> None:
        self._config = config or ClientConfig.from_env(base_url=base_url)
        self._owns_http = http is None
        self._http = http or httpx.Client(**get_httpx_client_kwargs(self._config))
        self._connect_retries = connect_retries

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def send(self, request: Request) -> Response:
        logger.info(
            f"Client sending {request.method!s} request to {request.url} "
            f"with {len(request.body)} bytes of data"
        )
        logger.debug(f"HEADERS: {request.headers}")

        try:
            if self._connect_retries:
                response = Retrying(**_retry_policy(self._connect_retries))(
                    self._send, request
                )
            else:
                response = self._send(request)
        except httpx.HTTPError as e:
            raise TransportError(str(request.method), request.url, str(e)) from e

        logger.info(
            f"Client received {response.status_code} response "
            f"with {len(response.content)} bytes of body data"
        )
        return _to_response(response)

    def _send(self, request: Request) -> httpx.Response:
        return self._http.request(
            str(request.method),
            request.url,
            headers=request.headers,
            content=request.body,
        )

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "HttpxClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class AsyncHttpxClient(AsyncClient):
    """Asyncio transport backed by ``httpx.AsyncClient``.

    Takes the same arguments as :class:`HttpxClient`.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        config: Optional[ClientConfig] = None,
        http: Optional[httpx.AsyncClient] = None,
        connect_retries: int = 0,
    ) -> None:
        self._config = config or ClientConfig.from_env(base_url=base_url)
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            **get_httpx_client_kwargs(self._config)
        )
        self._connect_retries = connect_retries

    @property
    def base_url(self) -> str:
        return self._config.base_url

    async def send(self, request: Request) -> Response:
        logger.info(
            f"Client sending {request.method!s} request to {request.url} "
            f"with {len(request.body)} bytes of data"
        )
        logger.debug(f"HEADERS: {request.headers}")

        try:
            if self._connect_retries:
                async for attempt in AsyncRetrying(
                    **_retry_policy(self._connect_retries)
                ):
                    with attempt:
                        response = await self._send(request)
            else:
                response = await self._send(request)
        except httpx.HTTPError as e:
            raise TransportError(str(request.method), request.url, str(e)) from e

        logger.info(
            f"Client received {response.status_code} response "
            f"with {len(response.content)} bytes of body data"
        )
        return _to_response(response)

    async def _send(self, request: Request) -> httpx.Response:
        return await self._http.request(
            str(request.method),
            request.url,
            headers=request.headers,
            content=request.body,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "AsyncHttpxClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
