"""
HTTPX client for the rental backend API with retries and backoff + jitter.

Transient failures (5xx, connect errors, timeouts) are retried; client
errors (4xx) are returned to the caller untouched.
"""

import random
import time
from typing import Any, Dict, Optional

import httpx

from .log_config import get_logger, log_api_call
from .settings import BoxRentalSettings, settings

logger = get_logger(__name__)

RETRYABLE_STATUS_CODES = {500, 502, 503, 504}

RETRYABLE_EXCEPTIONS = (
    httpx.ConnectTimeout,
    httpx.ConnectError,
    httpx.ReadTimeout,
)


class ApiRetryError(Exception):
    """Raised when the backend keeps failing after all retries."""


def calculate_backoff_delay(attempt: int, base_delay: float = 0.25, max_delay: float = 5.0) -> float:
    """
    Exponential backoff delay with up to 20% jitter.

    Args:
        attempt: Current retry attempt (0-based)
        base_delay: Base delay in seconds
        max_delay: Maximum delay before jitter, in seconds
    """
    delay = min(base_delay * (2 ** attempt), max_delay)
    return delay + random.uniform(0, 0.2 * delay)


class ApiClient:
    """
    Client for the rental backend's ``/api`` endpoints.

    Paths are resolved against ``base_url``; use as a context manager so the
    underlying connection pool is closed.
    """

    def __init__(
        self,
        base_url: str,
        max_retries: int = 2,
        base_delay: float = 0.25,
        max_delay: float = 5.0,
        timeout: float = 10.0,
        **client_kwargs
    ):
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay

        client_kwargs.setdefault("timeout", timeout)
        self._client = httpx.Client(base_url=self.base_url, **client_kwargs)

    @classmethod
    def from_settings(cls, config: Optional[BoxRentalSettings] = None, **client_kwargs) -> "ApiClient":
        """Build a client from the configured backend URL and retry policy."""
        config = config or settings()
        client_kwargs.setdefault("headers", config.get_api_headers())
        return cls(
            config.api_base_url,
            max_retries=config.api_max_retries,
            timeout=config.api_timeout,
            **client_kwargs
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self._client.close()

    def request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """
        Send a request, retrying transient failures.

        Raises:
            ApiRetryError: When max retries are exceeded
            httpx.HTTPError: For non-retryable transport errors
        """
        url = f"{self.base_url}{path}"
        attempts = self.max_retries + 1

        for attempt in range(attempts):
            is_last = attempt == attempts - 1
            started = time.monotonic()

            try:
                response = self._client.request(method, path, **kwargs)
            except RETRYABLE_EXCEPTIONS as exc:
                if is_last:
                    logger.error(
                        "Max retries exceeded",
                        method=method,
                        url=url,
                        max_retries=self.max_retries,
                        exception=str(exc)
                    )
                    raise ApiRetryError(f"Max retries exceeded: {exc}") from exc

                delay = calculate_backoff_delay(attempt, self.base_delay, self.max_delay)
                logger.warning(
                    "API request failed with exception, retrying",
                    method=method,
                    url=url,
                    exception=str(exc),
                    attempt=attempt + 1,
                    retry_after=delay
                )
                time.sleep(delay)
                continue

            duration_ms = (time.monotonic() - started) * 1000
            log_api_call(logger, method, url, response.status_code, duration_ms, attempt=attempt + 1)

            if response.status_code not in RETRYABLE_STATUS_CODES:
                return response

            if is_last:
                raise ApiRetryError(f"Max retries exceeded: HTTP {response.status_code}")

            delay = calculate_backoff_delay(attempt, self.base_delay, self.max_delay)
            logger.warning(
                "API request failed, retrying",
                method=method,
                url=url,
                status_code=response.status_code,
                attempt=attempt + 1,
                retry_after=delay
            )
            time.sleep(delay)

        # range() is never empty since max_retries >= 0
        raise ApiRetryError("Max retries exceeded")

    def get(self, path: str, **kwargs) -> httpx.Response:
        return self.request("GET", path, **kwargs)

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET a path and decode its JSON body.

        Raises:
            ApiRetryError: When max retries are exceeded
            httpx.HTTPStatusError: For 4xx responses
            ValueError: When the body is not valid JSON
        """
        response = self.get(path, params=params)
        return _decode_json(response, path)

    def post_json(self, path: str, payload: Dict[str, Any]) -> Any:
        """POST a JSON payload and decode the JSON response."""
        response = self.request("POST", path, json=payload)
        return _decode_json(response, path)


def _decode_json(response: httpx.Response, path: str) -> Any:
    if 400 <= response.status_code < 500:
        response.raise_for_status()

    try:
        return response.json()
    except ValueError as exc:
        logger.error(
            "Failed to parse JSON response",
            path=path,
            status_code=response.status_code,
            response_text=response.text[:500]
        )
        raise ValueError(f"Invalid JSON response: {exc}") from exc
