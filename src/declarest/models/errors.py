from typing import Optional, Union


class DeclarestError(Exception):
    """Base class for every error raised while compiling or executing an endpoint."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class BaseUrlMissingError(DeclarestError):
    def __init__(
        self,
        message="Base URL missing. Pass base_url explicitly or set the DECLAREST_BASE_URL environment variable.",
    ):
        super().__init__(message)


class DeclarationError(DeclarestError):
    """Raised when an endpoint class is declared with an invalid configuration.

    Covers conflicting field roles (two raw fields, a raw field that is not
    ``bytes``, a body field next to a raw field) and malformed path templates.
    It is raised while the class body is being processed, before any instance
    exists.
    """

    def __init__(self, endpoint: str, reason: str):
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(f"Invalid endpoint declaration '{endpoint}': {reason}")


class PathResolutionError(DeclarestError):
    """Raised when a path placeholder cannot be resolved against the instance."""

    def __init__(self, template: str, placeholder: str, reason: str):
        self.template = template
        self.placeholder = placeholder
        super().__init__(
            f"Cannot resolve placeholder '{{{placeholder}}}' in path '{template}': {reason}"
        )


class SerializationError(DeclarestError):
    """Raised when query or body fields cannot be serialized."""

    def __init__(self, target: str, reason: str):
        self.target = target
        super().__init__(f"Error serializing {target}: {reason}")


class TransportError(DeclarestError):
    """Raised when the transport fails to complete the network exchange."""

    def __init__(self, method: str, url: str, reason: str):
        self.method = method
        self.url = url
        super().__init__(f"Error sending {method} request to {url}: {reason}")


class ResponseError(DeclarestError):
    """Raised when the server answers with a status outside 200-208.

    ``content`` holds the body decoded as UTF-8, or the raw bytes when the
    body is not valid UTF-8.
    """

    def __init__(self, status_code: int, content: Union[str, bytes]):
        self.status_code = status_code
        self.content = content
        super().__init__(f"Server returned error {status_code}: {content!r}")


class ResponseParseError(DeclarestError):
    """Raised when a successful response cannot be unwrapped or deserialized."""

    def __init__(self, reason: str, content: Optional[str] = None):
        self.reason = reason
        self.content = content
        super().__init__(f"Error parsing HTTP response: {reason}")


class MiddlewareError(DeclarestError):
    """Raised when a middleware fails while mutating a request or a response."""

    def __init__(self, middleware: str, stage: str, reason: str):
        self.middleware = middleware
        self.stage = stage
        super().__init__(f"Middleware {middleware} failed on {stage}: {reason}")
