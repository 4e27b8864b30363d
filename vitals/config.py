"""
Configuration management with environment variable support and validation.

Design principles:
- Every tunable lives in an explicit config object passed into components
- Validation at startup (fail fast)
- Type safety with Pydantic
- Secure defaults (no API keys in code)
"""

import os
from functools import lru_cache
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from vitals.exceptions import ConfigurationError

# Load environment variables from .env file
load_dotenv()

DEFAULT_BASE_URL = "https://assessment.ksensetech.com/api"


class ApiConfig(BaseModel):
    """Remote patient service connection settings."""

    base_url: str = Field(default=DEFAULT_BASE_URL, description="Patient service base URL")
    api_key: str = Field(..., description="Opaque request key sent with every call")
    api_key_header: str = Field(default="x-api-key", description="Header carrying the API key")
    request_timeout_seconds: float = Field(
        default=30.0, gt=0.0, description="Timeout for a single HTTP request"
    )

    @field_validator("api_key")
    def validate_api_key(cls, v):
        if not v or not v.strip() or v == "your-api-key-here":
            raise ValueError("HEALTH_API_KEY must be set in environment or .env file")
        return v

    @field_validator("base_url")
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")


class RetryConfig(BaseModel):
    """Bounded retry with linear backoff, then a flat rate-limit window."""

    max_attempts: int = Field(default=5, gt=0, description="Attempts per page request")
    base_delay_seconds: float = Field(
        default=2.0, ge=0.0, description="Backoff unit for the early retries"
    )
    rate_limit_delay_seconds: float = Field(
        default=60.0, ge=0.0, description="Flat delay once early retries are used up"
    )
    rate_limit_after_attempt: int = Field(
        default=3, gt=0, description="Attempts after which the flat delay applies"
    )


class PaginationConfig(BaseModel):
    """Page walk settings."""

    page_size: int = Field(default=5, ge=1, le=20, description="Records requested per page")
    first_page: int = Field(default=1, ge=1, description="Index of the first page")


class OutputConfig(BaseModel):
    """Where the results of a run go."""

    evaluated_records_path: str = Field(
        default="./evaluatedPatients.json", description="JSON file for evaluated records"
    )
    submit_results: bool = Field(default=True, description="POST the summary when done")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    api: ApiConfig
    retry: RetryConfig = Field(default_factory=RetryConfig)
    pagination: PaginationConfig = Field(default_factory=PaginationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Literal["development", "staging", "production"]:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        v = val.strip().upper()
        return cast(
            Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO",
        )

    def _parse_bool(val: str | None, default: bool) -> bool:
        if val is None:
            return default
        return val.strip().lower() in {"1", "true", "yes", "on"}

    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    try:
        api_config = ApiConfig(
            base_url=os.getenv("HEALTH_API_BASE_URL", DEFAULT_BASE_URL),
            api_key=os.getenv("HEALTH_API_KEY", ""),
            request_timeout_seconds=float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30.0")),
        )

        retry_config = RetryConfig(
            max_attempts=int(os.getenv("RETRY_MAX_ATTEMPTS", "5")),
            base_delay_seconds=float(os.getenv("RETRY_BASE_DELAY_SECONDS", "2.0")),
            rate_limit_delay_seconds=float(os.getenv("RETRY_RATE_LIMIT_DELAY_SECONDS", "60.0")),
        )

        pagination_config = PaginationConfig(page_size=int(os.getenv("PAGE_SIZE", "5")))

        output_config = OutputConfig(
            evaluated_records_path=os.getenv("EVALUATED_RECORDS_PATH", "./evaluatedPatients.json"),
            submit_results=_parse_bool(os.getenv("SUBMIT_RESULTS"), True),
        )

        logging_config = LoggingConfig(
            level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
            format="console" if debug else "json",
        )

        return AppConfig(
            environment=environment,
            debug=debug,
            api=api_config,
            retry=retry_config,
            pagination=pagination_config,
            output=output_config,
            logging=logging_config,
        )
    except (ValidationError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()


def reset_config_cache() -> None:
    """Forget the cached configuration so the next call re-reads the environment."""
    get_config.cache_clear()


def mask_secret(value: str, visible: int = 4) -> str:
    """Mask all but the last few characters of a secret for display."""
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]


def print_config_summary() -> None:
    """Print configuration summary for debugging."""
    config = get_config()

    print("\nCONFIGURATION SUMMARY")
    print(f"Environment: {config.environment}")
    print(f"Debug Mode: {config.debug}")
    print(f"Log Level: {config.logging.level}")

    print("\nAPI")
    print(f"Base URL: {config.api.base_url}")
    print(f"API Key: {mask_secret(config.api.api_key)}")
    print(f"Request Timeout: {config.api.request_timeout_seconds}s")

    print("\nRETRY")
    print(f"Max Attempts: {config.retry.max_attempts}")
    print(f"Base Delay: {config.retry.base_delay_seconds}s")
    print(f"Rate Limit Delay: {config.retry.rate_limit_delay_seconds}s")

    print("\nOUTPUT")
    print(f"Page Size: {config.pagination.page_size}")
    print(f"Evaluated Records: {config.output.evaluated_records_path}")
    print(f"Submit Results: {config.output.submit_results}")


if __name__ == "__main__":
    print_config_summary()
