from typing import Callable, Generator, List, Optional

import pytest
from httpx import Headers

from declarest import Client, HttpxClient, Request, Response


class StubClient(Client):
    """Transport double that records requests and replays one response."""

    def __init__(self, response: Response, base_url: str = "http://api.test") -> None:
        self.response = response
        self.requests: List[Request] = []
        self._base_url = base_url

    @property
    def base_url(self) -> str:
        return self._base_url

    def send(self, request: Request) -> Response:
        self.requests.append(request)
        return self.response


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clean environment variables before each test."""
    monkeypatch.delenv("DECLAREST_BASE_URL", raising=False)
    monkeypatch.delenv("DECLAREST_TIMEOUT", raising=False)
    monkeypatch.delenv("DECLAREST_VERIFY_SSL", raising=False)
    monkeypatch.delenv("DECLAREST_FOLLOW_REDIRECTS", raising=False)


@pytest.fixture
def base_url() -> str:
    return "http://api.test"


@pytest.fixture
def client(base_url: str) -> Generator[HttpxClient, None, None]:
    with HttpxClient(base_url) as http_client:
        yield http_client


@pytest.fixture
def stub_client() -> Callable[..., StubClient]:
    """Build a transport double answering every request with the given response."""

    def make(
        status_code: int = 200,
        body: bytes = b"",
        headers: Optional[dict] = None,
    ) -> StubClient:
        return StubClient(
            Response(status_code=status_code, headers=Headers(headers or {}), body=body)
        )

    return make
