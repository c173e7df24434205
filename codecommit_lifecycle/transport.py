"""
HTTP Transport for the repository service.

Handles HTTP communication with automatic retry logic, bearer
authentication and error handling.
"""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from codecommit_lifecycle.exceptions import (
    AuthenticationError,
    AuthorizationError,
    CodeCommitError,
    InvalidRequestError,
    RateLimitedError,
    RepositoryExistsError,
    RepositoryNotFoundError,
    ServerError,
)
from codecommit_lifecycle.logging import log_http_request, log_http_response


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    # Methods that may be replayed; others are sent exactly once.
    retry_methods: frozenset[str] = frozenset({"GET"})
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # seconds
    jitter: float = 0.1  # 0.1 = ±10%


class HTTPTransport:
    """
    HTTP transport layer with bearer authentication and retry logic.

    Handles:
    - Exponential backoff with jitter for retries
    - Retry-After header respect for rate limiting
    - Error response parsing into typed exceptions

    Retries are the transport's business only; lifecycle jobs never retry.
    """

    def __init__(
        self,
        base_url: str,
        region: str,
        token: str | None = None,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://gateway.example.com")
            region: Region sent with every request
            token: Optional bearer token
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
        """
        self.base_url = base_url.rstrip("/")
        self.region = region
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        headers = {"Content-Type": "application/json", "X-Region": region}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers=headers,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Make a request with automatic retry.

        Args:
            method: HTTP method
            path: API path (e.g., "/v1/repositories")
            params: Query parameters
            body: Request body (for POST/PUT)

        Returns:
            Parsed JSON response (empty dict for empty bodies)

        Raises:
            RemoteError: On API errors
        """
        def make_request() -> httpx.Response:
            log_http_request(method, f"{self.base_url}{path}", body=body)
            return self._client.request(method, path, params=params, json=body)

        return self._execute_with_retry(make_request, method)

    def _execute_with_retry(
        self, request_fn: Callable[[], httpx.Response], method: str = "GET"
    ) -> dict[str, Any]:
        """
        Execute a request with automatic retry on retryable errors.

        Methods outside ``retry_config.retry_methods`` are sent exactly once.

        Raises:
            RemoteError: On non-retryable errors or after max retries
        """
        last_error: Exception | None = None
        max_retries = self.retry_config.max_retries
        if method.upper() not in self.retry_config.retry_methods:
            max_retries = 0

        for attempt in range(max_retries + 1):
            try:
                started = time.monotonic()
                response = request_fn()
                elapsed_ms = (time.monotonic() - started) * 1000

                if response.status_code < 400:
                    data = self._parse_success_response(response)
                    log_http_response(
                        response.status_code, str(response.url), data, elapsed_ms
                    )
                    return data

                log_http_response(response.status_code, str(response.url), None, elapsed_ms)

                error = self._parse_error_response(response)

                if attempt >= max_retries or not self._should_retry(response.status_code, attempt):
                    raise error

                last_error = error

                retry_after = response.headers.get("Retry-After")
                wait_time = self._get_backoff_time(attempt, retry_after)
                time.sleep(wait_time)

            except httpx.RequestError as e:
                # Network errors are retryable for idempotent methods
                if attempt >= max_retries:
                    raise ServerError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                wait_time = self._get_backoff_time(attempt, None)
                time.sleep(wait_time)

        if last_error:
            if isinstance(last_error, CodeCommitError):
                raise last_error
            raise ServerError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        """Return True if a response with this status should be retried."""
        if attempt >= self.retry_config.max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass  # Fall through to exponential backoff

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)

    def _parse_success_response(self, response: httpx.Response) -> dict[str, Any]:
        """Decode a 2xx body; an empty body decodes to an empty dict."""
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            raise ServerError(
                "INVALID_RESPONSE",
                f"HTTP {response.status_code} response is not valid JSON",
            ) from e
        if not isinstance(data, dict):
            raise ServerError(
                "INVALID_RESPONSE",
                f"HTTP {response.status_code} response is not a JSON object",
            )
        return data

    def _parse_error_response(self, response: httpx.Response) -> CodeCommitError:
        """Parse an error response into a typed exception."""
        try:
            data = response.json()
        except ValueError:
            data = {}

        if not isinstance(data, dict):
            data = {}

        error = data.get("error") or {}
        code = error.get("code", "UNKNOWN_ERROR")
        message = error.get("message", f"HTTP {response.status_code}")
        request_id = (data.get("meta") or {}).get("requestId")

        status_code = response.status_code

        if status_code == 401:
            return AuthenticationError(code, message, request_id)
        elif status_code == 403:
            return AuthorizationError(code, message, request_id)
        elif status_code == 404:
            return RepositoryNotFoundError(code, message, request_id)
        elif status_code == 409:
            return RepositoryExistsError(code, message, request_id)
        elif status_code == 429:
            retry_after_str = response.headers.get("Retry-After", "60")
            try:
                retry_after = int(retry_after_str)
            except ValueError:
                retry_after = 60
            return RateLimitedError(code, message, retry_after, request_id)
        elif status_code >= 500:
            return ServerError(code, message, request_id)
        else:
            return InvalidRequestError(code, message, request_id)
