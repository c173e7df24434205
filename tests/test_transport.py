"""
Property-based tests for HTTP Transport retry behavior and error mapping.

Feature: codecommit-lifecycle
"""

from unittest.mock import MagicMock, patch

import httpx
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from codecommit_lifecycle.exceptions import (
    AuthenticationError,
    AuthorizationError,
    InvalidRequestError,
    RateLimitedError,
    RepositoryExistsError,
    RepositoryNotFoundError,
    ServerError,
)
from codecommit_lifecycle.transport import HTTPTransport, RetryConfig

# Test strategies
backoff_factor_strategy = st.floats(min_value=1.1, max_value=5.0)
attempt_strategy = st.integers(min_value=0, max_value=5)
retry_after_strategy = st.integers(min_value=1, max_value=120)

BASE_URL = "https://codecommit.us-east-1.amazonaws.com"


def make_transport(config: RetryConfig | None = None, token: str | None = None) -> HTTPTransport:
    return HTTPTransport(
        base_url=BASE_URL,
        region="us-east-1",
        token=token,
        retry_config=config,
    )


def make_response(status_code: int, body: dict | None = None, headers: dict | None = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body if body is not None else {}
    response.content = b"{}" if body is not None else b""
    response.headers = headers or {}
    response.url = f"{BASE_URL}/v1/repositories"
    return response


@given(
    backoff_factor=backoff_factor_strategy,
    attempt=attempt_strategy,
)
@settings(max_examples=100)
def test_exponential_backoff_timing(backoff_factor: float, attempt: int) -> None:
    """
    Property: exponential backoff timing

    For any retry configuration with backoff_factor B and attempt number N,
    the wait time before attempt N is approximately B^N seconds (with jitter).
    """
    config = RetryConfig(
        backoff_factor=backoff_factor,
        jitter=0.1,
        max_backoff=1000.0,
    )
    transport = make_transport(config)

    expected_base = backoff_factor ** attempt
    actual = transport._get_backoff_time(attempt, None)

    min_expected = min(expected_base * 0.9, config.max_backoff)
    max_expected = min(expected_base * 1.1, config.max_backoff)

    assert min_expected - 1e-9 <= actual <= max_expected + 1e-9


@given(retry_after=retry_after_strategy)
@settings(max_examples=100)
def test_retry_after_header_respected(retry_after: int) -> None:
    """
    Property: Retry-After header respected

    For any Retry-After value of T seconds, the wait is exactly T.
    """
    transport = make_transport(RetryConfig(respect_retry_after=True))

    assert transport._get_backoff_time(0, str(retry_after)) == float(retry_after)


@given(
    status_code=st.sampled_from([400, 401, 403, 404, 409]),
    attempt=st.integers(min_value=0, max_value=2),
)
@settings(max_examples=100)
def test_no_retry_on_non_retryable_errors(status_code: int, attempt: int) -> None:
    """Property: client errors other than 429 are never retried."""
    transport = make_transport(RetryConfig(max_retries=3))

    assert not transport._should_retry(status_code, attempt)


@given(
    status_code=st.sampled_from([429, 500, 502, 503]),
    attempt=st.integers(min_value=0, max_value=2),
)
@settings(max_examples=100)
def test_retry_on_retryable_errors(status_code: int, attempt: int) -> None:
    """Retryable status codes trigger a retry while under max_retries."""
    transport = make_transport(RetryConfig(max_retries=3))

    assert transport._should_retry(status_code, attempt)


def test_max_retries_exceeded() -> None:
    """Retries stop after max_retries is reached."""
    transport = make_transport(RetryConfig(max_retries=2))

    assert transport._should_retry(500, 0)
    assert transport._should_retry(500, 1)
    assert not transport._should_retry(500, 2)


@pytest.mark.parametrize(
    "status_code, error_type",
    [
        (400, InvalidRequestError),
        (401, AuthenticationError),
        (403, AuthorizationError),
        (404, RepositoryNotFoundError),
        (409, RepositoryExistsError),
        (422, InvalidRequestError),
        (500, ServerError),
        (503, ServerError),
    ],
)
def test_error_responses_map_to_typed_exceptions(status_code: int, error_type: type) -> None:
    transport = make_transport()
    response = make_response(
        status_code,
        {"error": {"code": "SOME_CODE", "message": "went wrong"}, "meta": {"requestId": "req-1"}},
    )

    error = transport._parse_error_response(response)

    assert isinstance(error, error_type)
    assert error.code == "SOME_CODE"
    assert error.message == "went wrong"
    assert error.request_id == "req-1"


def test_rate_limited_error_carries_retry_after() -> None:
    transport = make_transport()
    response = make_response(429, {"error": {"code": "THROTTLED", "message": "slow down"}}, {"Retry-After": "7"})

    error = transport._parse_error_response(response)

    assert isinstance(error, RateLimitedError)
    assert error.retry_after == 7


def test_unparseable_error_body_falls_back_to_status() -> None:
    transport = make_transport()
    response = make_response(500)
    response.json.side_effect = ValueError("not json")

    error = transport._parse_error_response(response)

    assert isinstance(error, ServerError)
    assert error.code == "UNKNOWN_ERROR"
    assert error.message == "HTTP 500"


def test_request_retries_then_succeeds() -> None:
    transport = make_transport(RetryConfig(max_retries=2))
    responses = [make_response(503, {}), make_response(200, {"data": {"ok": True}})]

    with patch.object(transport._client, "request", side_effect=responses) as request, \
            patch("codecommit_lifecycle.transport.time.sleep") as sleep:
        result = transport.request("GET", "/v1/repositories")

    assert result == {"data": {"ok": True}}
    assert request.call_count == 2
    assert sleep.call_count == 1


def test_request_does_not_retry_conflict() -> None:
    transport = make_transport(RetryConfig(max_retries=3))
    conflict = make_response(409, {"error": {"code": "REPOSITORY_NAME_EXISTS", "message": "taken"}})

    with patch.object(transport._client, "request", return_value=conflict) as request, \
            patch("codecommit_lifecycle.transport.time.sleep") as sleep:
        with pytest.raises(RepositoryExistsError):
            transport.request("POST", "/v1/repositories", body={"repositoryName": "demo"})

    assert request.call_count == 1
    sleep.assert_not_called()


def test_connection_errors_become_server_error() -> None:
    transport = make_transport(RetryConfig(max_retries=1))
    failure = httpx.ConnectError("connection refused")

    with patch.object(transport._client, "request", side_effect=failure) as request, \
            patch("codecommit_lifecycle.transport.time.sleep"):
        with pytest.raises(ServerError) as exc_info:
            transport.request("GET", "/v1/repositories")

    assert exc_info.value.code == "CONNECTION_ERROR"
    assert request.call_count == 2


def test_empty_success_body_returns_empty_dict() -> None:
    transport = make_transport()

    with patch.object(transport._client, "request", return_value=make_response(204)):
        assert transport.request("DELETE", "/v1/repositories/demo") == {}


def test_headers_include_region_and_bearer_token() -> None:
    transport = make_transport(token="secret-token")

    assert transport._client.headers["X-Region"] == "us-east-1"
    assert transport._client.headers["Authorization"] == "Bearer secret-token"
    transport.close()


def test_no_authorization_header_without_token() -> None:
    with make_transport() as transport:
        assert "Authorization" not in transport._client.headers


@pytest.mark.parametrize("method", ["POST", "DELETE"])
def test_mutating_request_not_replayed_after_timeout(method: str) -> None:
    """A create or delete that timed out may have been applied; it is sent once."""
    transport = make_transport(RetryConfig(max_retries=3))
    already_exists = make_response(409, {"error": {"code": "REPOSITORY_NAME_EXISTS", "message": "taken"}})

    with patch.object(
        transport._client, "request", side_effect=[httpx.ReadTimeout("timed out"), already_exists]
    ) as request, patch("codecommit_lifecycle.transport.time.sleep") as sleep:
        with pytest.raises(ServerError) as exc_info:
            transport.request(method, "/v1/repositories", body={"repositoryName": "demo"})

    assert exc_info.value.code == "CONNECTION_ERROR"
    assert request.call_count == 1
    sleep.assert_not_called()


def test_mutating_request_not_replayed_after_server_error() -> None:
    transport = make_transport(RetryConfig(max_retries=3))

    with patch.object(transport._client, "request", return_value=make_response(503, {})) as request, \
            patch("codecommit_lifecycle.transport.time.sleep"):
        with pytest.raises(ServerError):
            transport.request("POST", "/v1/repositories", body={"repositoryName": "demo"})

    assert request.call_count == 1


def test_retry_methods_configurable() -> None:
    transport = make_transport(RetryConfig(max_retries=1, retry_methods=frozenset({"GET", "DELETE"})))
    responses = [make_response(503, {}), make_response(200, {})]

    with patch.object(transport._client, "request", side_effect=responses) as request, \
            patch("codecommit_lifecycle.transport.time.sleep"):
        transport.request("DELETE", "/v1/repositories/demo")

    assert request.call_count == 2


def test_non_json_success_body_becomes_server_error() -> None:
    transport = make_transport()
    response = make_response(200, {})
    response.content = b"<html>gateway</html>"
    response.json.side_effect = ValueError("Expecting value")

    with patch.object(transport._client, "request", return_value=response):
        with pytest.raises(ServerError) as exc_info:
            transport.request("GET", "/v1/repositories")

    assert exc_info.value.code == "INVALID_RESPONSE"
