"""
Single page retrieval with response validation and bounded retry.

Key patterns:
- Protocol-based transport injection (fakes in tests, requests in production)
- Result type for expected per-attempt failures
- Cooperative backoff sleep, injectable so tests never wait
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

import structlog
from pydantic import ValidationError

from vitals.config import ApiConfig, RetryConfig
from vitals.domain.models import PageRequest, PageResponse
from vitals.exceptions import FetchExhaustedError, TransientFetchError
from vitals.services.transport import HttpTransport

logger = structlog.get_logger(__name__)

ValueT = TypeVar("ValueT")

SleepFunc = Callable[[float], Awaitable[object]]


class Result(Generic[ValueT]):
    """
    Explicit error handling without exceptions for expected failures.

    A failed fetch attempt is business as usual for a flaky upstream, so the
    attempt reports it as a value and the retry loop decides what to do.
    """

    def __init__(self, value: ValueT | None = None, error: Exception | None = None) -> None:
        if value is not None and error is not None:
            raise ValueError("Result cannot have both value and error")
        if value is None and error is None:
            raise ValueError("Result must have either value or error")
        self._value: ValueT | None = value
        self._error: Exception | None = error

    @classmethod
    def ok(cls, value: ValueT) -> "Result[ValueT]":
        return cls(value=value)

    @classmethod
    def err(cls, error: Exception) -> "Result[ValueT]":
        return cls(error=error)

    def is_ok(self) -> bool:
        return self._error is None

    def unwrap(self) -> ValueT:
        if self._error:
            raise self._error
        return self._value  # type: ignore

    def unwrap_err(self) -> Exception:
        if self._error is None:
            raise ValueError("Called unwrap_err() on an Ok value")
        return self._error


def backoff_delay(attempt: int, config: RetryConfig) -> float:
    """
    Seconds to wait before ``attempt`` (1-based).

    No wait before the first attempt, ``base * (attempt - 1)`` up to the
    rate-limit threshold, then a flat window to ride out rate limiting.
    """
    if attempt <= 1:
        return 0.0
    if attempt <= config.rate_limit_after_attempt:
        return config.base_delay_seconds * (attempt - 1)
    return config.rate_limit_delay_seconds


class RetryingFetcher:
    """
    Fetches one page of patients, retrying until a well-formed page arrives.

    Design principles:
    - A page is only accepted with a 2xx status and a ``data`` array
    - Bounded: at most ``max_attempts`` calls, then the last error escalates
    - Observable: every attempt, failure and scheduled retry is logged
    """

    def __init__(
        self,
        transport: HttpTransport,
        api_config: ApiConfig,
        retry_config: RetryConfig | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self.transport = transport
        self.api_config = api_config
        self.retry_config = retry_config or RetryConfig()
        self._sleep = sleep
        self.logger = logger.bind(component="retrying_fetcher")

    @property
    def patients_url(self) -> str:
        return f"{self.api_config.base_url}/patients"

    def _headers(self) -> dict[str, str]:
        return {self.api_config.api_key_header: self.api_config.api_key}

    async def _attempt(self, request: PageRequest) -> Result[PageResponse]:
        """Perform one request and validate the body."""
        try:
            response = await self.transport.get(
                self.patients_url, params=request.as_params(), headers=self._headers()
            )

            if not response.ok:
                raise TransientFetchError(
                    f"Failed to retrieve patients. Status: {response.status_code}",
                    status_code=response.status_code,
                )

            try:
                page = PageResponse.model_validate(response.body)
            except ValidationError as e:
                self.logger.warning(
                    "invalid_page_body", page=request.page, body=repr(response.body)[:500]
                )
                raise TransientFetchError(f"Invalid response for page {request.page}") from e

            if "pagination" not in response.body:
                self.logger.warning("page_missing_pagination", page=request.page)

            return Result.ok(page)

        except Exception as e:
            self.logger.warning(
                "page_fetch_failed",
                page=request.page,
                error=str(e),
                error_type=type(e).__name__,
            )
            return Result.err(e)

    async def fetch(self, request: PageRequest) -> PageResponse:
        """
        Fetch a validated page.

        Raises:
            FetchExhaustedError: After ``max_attempts`` failed attempts, chained
                from the last attempt's error.
        """
        max_attempts = self.retry_config.max_attempts
        last_error: Exception | None = None

        for attempt in range(1, max_attempts + 1):
            delay = backoff_delay(attempt, self.retry_config)
            if delay > 0:
                self.logger.info(
                    "page_fetch_retry_scheduled",
                    page=request.page,
                    attempt=attempt,
                    delay_seconds=delay,
                )
                await self._sleep(delay)

            self.logger.info(
                "page_fetch_attempt", page=request.page, attempt=attempt, max_attempts=max_attempts
            )
            result = await self._attempt(request)

            if result.is_ok():
                return result.unwrap()
            last_error = result.unwrap_err()

        assert last_error is not None
        self.logger.error(
            "page_fetch_exhausted",
            page=request.page,
            attempts=max_attempts,
            error=str(last_error),
        )
        raise FetchExhaustedError(max_attempts, request.page, last_error) from last_error
