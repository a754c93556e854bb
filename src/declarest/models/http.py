from dataclasses import dataclass, field
from typing import Optional

from httpx import Headers

from .enums import RequestMethod

HTTP_SUCCESS_CODES = range(200, 209)


@dataclass
class Request:
    """A compiled HTTP request, ready to be handed to a transport.

    Headers start empty; only middleware adds to them.
    """

    method: RequestMethod
    url: str
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""


@dataclass
class Response:
    """An HTTP response as returned by a transport.

    Middleware may replace ``body`` or edit ``headers`` in place before the
    response is validated and converted.
    """

    status_code: int
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""

    @property
    def is_success(self) -> bool:
        return self.status_code in HTTP_SUCCESS_CODES

    @property
    def text(self) -> Optional[str]:
        """The body decoded as UTF-8, or ``None`` if it is not valid UTF-8."""
        try:
            return self.body.decode("utf-8")
        except UnicodeDecodeError:
            return None
