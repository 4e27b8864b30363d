"""Exception hierarchy for the vitals risk assessment pipeline."""

from typing import Any


class VitalsError(Exception):
    """Base exception for all vitals pipeline errors."""


class ConfigurationError(VitalsError):
    """Raised when configuration cannot be loaded or is invalid."""


class TransientFetchError(VitalsError):
    """Raised for a single failed page fetch attempt that may succeed on retry."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FetchExhaustedError(VitalsError):
    """Raised when a page fetch failed on every allowed attempt."""

    def __init__(self, attempts: int, page: int, last_error: BaseException) -> None:
        super().__init__(f"Page {page} fetch failed after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.page = page
        self.last_error = last_error


class BatchEvaluationError(VitalsError):
    """Raised when a page's records collection is not a well-formed sequence."""

    def __init__(self, message: str, payload: Any) -> None:
        super().__init__(message)
        self.payload = payload


class SummarySubmissionError(VitalsError):
    """Raised when the risk summary could not be submitted.

    The already computed result is attached so the caller can still use it.
    """

    def __init__(
        self, message: str, status_code: int | None = None, result: Any | None = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.result = result
