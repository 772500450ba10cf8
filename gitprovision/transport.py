"""
HTTP Transport for hosting provider clients.

Handles token authentication, error mapping and optional retry logic for
requests made against a Git hosting API.
"""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from gitprovision.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    GitProvisionError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from gitprovision.logging import log_http_request, log_http_response


@dataclass
class RetryConfig:
    """
    Configuration for automatic retry behavior.

    Retries are opt-in: the default performs a single attempt.
    """

    max_retries: int = 0
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class HTTPTransport:
    """
    HTTP transport layer with token authentication and typed errors.

    Handles:
    - Authorization header for every request
    - Error response parsing into typed exceptions
    - Exponential backoff with jitter when retries are enabled
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        auth_header: str = "Authorization",
        auth_scheme: str | None = "Bearer",
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token: Access token sent with every request
            auth_header: Header carrying the token
            auth_scheme: Prefix for the header value, None to send the bare token
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        auth_value = f"{auth_scheme} {token}" if auth_scheme else token
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                auth_header: auth_value,
            },
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
    ) -> Any:
        """
        Make an authenticated request.

        Args:
            method: HTTP method
            path: API path relative to the base URL
            params: Query parameters
            body: JSON request body (for POST/PUT/PATCH)

        Returns:
            Parsed JSON response, or None for empty responses

        Raises:
            GitProvisionError: On API errors
        """
        def make_request() -> httpx.Response:
            log_http_request(method, f"{self.base_url}{path}", body=body)
            return self._client.request(method, path, params=params, json=body)

        return self._execute_with_retry(make_request)

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: dict[str, Any] | None = None) -> Any:
        return self.request("POST", path, body=body)

    def _execute_with_retry(
        self, request_fn: Callable[[], httpx.Response]
    ) -> Any:
        """
        Execute a request, retrying retryable errors when configured to.

        Raises:
            GitProvisionError: On non-retryable errors or after max retries
        """
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                started = time.monotonic()
                response = request_fn()
                elapsed_ms = (time.monotonic() - started) * 1000

                if response.status_code < 400:
                    data = self._parse_body(response)
                    log_http_response(
                        response.status_code, str(response.url), data, elapsed_ms
                    )
                    return data

                log_http_response(response.status_code, str(response.url), None, elapsed_ms)
                error = self._parse_error_response(response)

                if not self._should_retry(response.status_code, attempt):
                    raise error

                last_error = error

                retry_after = response.headers.get("Retry-After")
                wait_time = self._get_backoff_time(attempt, retry_after)
                time.sleep(wait_time)

            except httpx.RequestError as e:
                if attempt >= self.retry_config.max_retries:
                    raise ServerError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                wait_time = self._get_backoff_time(attempt, None)
                time.sleep(wait_time)

        if last_error:
            if isinstance(last_error, GitProvisionError):
                raise last_error
            raise ServerError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ServerError(
                "INVALID_RESPONSE",
                f"Expected a JSON response from {response.url}, got: {response.text[:200]!r}",
            ) from e

    def _should_retry(self, status_code: int, attempt: int) -> bool:
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

    def _parse_error_response(self, response: httpx.Response) -> GitProvisionError:
        """
        Parse an error response into a typed exception.

        Understands the GitHub/Gitea shape ({"message", "errors"}) and the
        GitLab shape ({"message"} or {"error"}).
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        message = _error_message(data) or f"HTTP {response.status_code}"
        code = f"HTTP_{response.status_code}"
        request_id = response.headers.get("X-GitHub-Request-Id") or response.headers.get(
            "X-Request-Id"
        )

        status_code = response.status_code

        if status_code == 401:
            return AuthenticationError(code, message, request_id)
        elif status_code == 403:
            return AuthorizationError(code, message, request_id)
        elif status_code == 404:
            return NotFoundError(code, message, request_id)
        elif status_code == 409 or (status_code in (400, 422) and "already" in message.lower()):
            return ConflictError(code, message, request_id)
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
            return ValidationError(code, message, request_id)


def _error_message(data: dict[str, Any]) -> str:
    """Flatten the error payloads of the supported hosting APIs into one line."""
    parts: list[str] = []
    message = data.get("message") or data.get("error")
    if isinstance(message, dict):
        # GitLab reports field errors as {"name": ["has already been taken"]}
        for key, value in message.items():
            text = ", ".join(value) if isinstance(value, list) else str(value)
            parts.append(f"{key} {text}")
    elif message:
        parts.append(str(message))

    for error in data.get("errors") or []:
        if isinstance(error, dict):
            detail = error.get("message") or error.get("code")
            if detail:
                parts.append(str(detail))
        elif error:
            parts.append(str(error))

    return ": ".join(parts)
