import json
from typing import Any, Callable, List

import pytest
from pydantic import BaseModel
from pytest_httpx import HTTPXMock

from declarest import (
    Endpoint,
    HeadersMiddleware,
    HttpxClient,
    MiddleWare,
    MiddlewareError,
    Request,
    Response,
    ResponseError,
    ResponseParseError,
)


class Age(BaseModel):
    age: int


class GetAge(Endpoint, path="people/{name}/age", response=Age):
    name: str


class Recorder(MiddleWare):
    def __init__(self, name: str, calls: List[str]) -> None:
        self.name = name
        self.calls = calls

    def on_request(self, endpoint: Endpoint, request: Request) -> None:
        self.calls.append(f"{self.name}.request")

    def on_response(self, endpoint: Endpoint, response: Response) -> None:
        self.calls.append(f"{self.name}.response")


class UnwrapResult(MiddleWare):
    """Replaces the body with the content of its "result" key."""

    def on_response(self, endpoint: Endpoint, response: Response) -> None:
        response.body = json.dumps(json.loads(response.body)["result"]).encode()


class Failing(MiddleWare):
    def __init__(self, stage: str) -> None:
        self.stage = stage

    def on_request(self, endpoint: Endpoint, request: Request) -> None:
        if self.stage == "request":
            raise ValueError("request rejected")

    def on_response(self, endpoint: Endpoint, response: Response) -> None:
        if self.stage == "response":
            raise ValueError("response rejected")


class TestMiddleware:
    def test_headers_are_added_before_sending(
        self, client: HttpxClient, httpx_mock: HTTPXMock, base_url: str
    ) -> None:
        httpx_mock.add_response(
            url=f"{base_url}/people/ada/age",
            match_headers={"X-API-Token": "mytoken"},
            json={"age": 30},
        )

        result = GetAge(name="ada").execute(
            client, [HeadersMiddleware({"X-API-Token": "mytoken"})]
        )

        assert result.age == 30

    def test_response_is_mutated_before_parsing(
        self, client: HttpxClient, httpx_mock: HTTPXMock, base_url: str
    ) -> None:
        httpx_mock.add_response(
            url=f"{base_url}/people/ada/age", json={"result": {"age": 30}}
        )

        assert GetAge(name="ada").execute(client, [UnwrapResult()]).age == 30

    def test_raw_execution_sees_mutated_body(
        self, client: HttpxClient, httpx_mock: HTTPXMock, base_url: str
    ) -> None:
        httpx_mock.add_response(
            url=f"{base_url}/people/ada/age", json={"result": {"age": 30}}
        )

        body = GetAge(name="ada").execute_raw(client, [UnwrapResult()])

        assert json.loads(body) == {"age": 30}

    def test_both_directions_run_in_registration_order(
        self, stub_client: Callable[..., Any]
    ) -> None:
        calls: List[str] = []
        transport = stub_client(body=b'{"age": 1}')

        GetAge(name="ada").execute(
            transport, [Recorder("first", calls), Recorder("second", calls)]
        )

        assert calls == [
            "first.request",
            "second.request",
            "first.response",
            "second.response",
        ]

    def test_request_sent_to_transport_carries_mutations(
        self, stub_client: Callable[..., Any]
    ) -> None:
        transport = stub_client(body=b'{"age": 1}')

        GetAge(name="ada").execute(transport, [HeadersMiddleware({"X-Trace": "1"})])

        assert transport.requests[0].headers["x-trace"] == "1"

    def test_request_failure_aborts_before_sending(
        self, stub_client: Callable[..., Any]
    ) -> None:
        calls: List[str] = []
        transport = stub_client(body=b'{"age": 1}')

        with pytest.raises(MiddlewareError) as exc_info:
            GetAge(name="ada").execute(
                transport, [Failing("request"), Recorder("after", calls)]
            )

        assert transport.requests == []
        assert calls == []
        assert exc_info.value.middleware == "Failing"
        assert exc_info.value.stage == "request"
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_response_failure_aborts_before_conversion(
        self, stub_client: Callable[..., Any]
    ) -> None:
        transport = stub_client(body=b"not json")

        with pytest.raises(MiddlewareError) as exc_info:
            GetAge(name="ada").execute(transport, [Failing("response")])

        assert len(transport.requests) == 1
        assert exc_info.value.stage == "response"

    def test_middleware_errors_are_not_wrapped_twice(
        self, stub_client: Callable[..., Any]
    ) -> None:
        class Rejecting(MiddleWare):
            def on_request(self, endpoint: Endpoint, request: Request) -> None:
                raise MiddlewareError("Auth", "request", "token expired")

        with pytest.raises(MiddlewareError) as exc_info:
            GetAge(name="ada").execute(stub_client(), [Rejecting()])

        assert exc_info.value.middleware == "Auth"

    def test_response_middleware_runs_before_status_validation(
        self, stub_client: Callable[..., Any]
    ) -> None:
        class AcceptNotFound(MiddleWare):
            def on_response(self, endpoint: Endpoint, response: Response) -> None:
                if response.status_code == 404:
                    response.status_code = 200
                    response.body = b'{"age": 0}'

        transport = stub_client(status_code=404, body=b"missing")

        assert GetAge(name="ada").execute(transport, [AcceptNotFound()]).age == 0

    def test_error_status_after_middleware(
        self, stub_client: Callable[..., Any]
    ) -> None:
        calls: List[str] = []
        transport = stub_client(status_code=500, body=b"boom")

        with pytest.raises(ResponseError) as exc_info:
            GetAge(name="ada").execute(transport, [Recorder("only", calls)])

        assert calls == ["only.request", "only.response"]
        assert exc_info.value.content == "boom"

    def test_endpoint_is_passed_to_hooks(self, stub_client: Callable[..., Any]) -> None:
        seen: List[Endpoint] = []

        class Capture(MiddleWare):
            def on_request(self, endpoint: Endpoint, request: Request) -> None:
                seen.append(endpoint)

        endpoint = GetAge(name="ada")
        endpoint.execute(stub_client(body=b'{"age": 1}'), [Capture()])

        assert seen == [endpoint]

    def test_parse_errors_still_surface_after_middleware(
        self, stub_client: Callable[..., Any]
    ) -> None:
        with pytest.raises(ResponseParseError):
            GetAge(name="ada").execute(stub_client(body=b"[]"), [MiddleWare()])
