"""
Tests for configuration management in `vitals/config.py`.

Covers:
- Environment parsing and debug defaults
- Logging level coercion to the expected Literal
- Retry and pagination overrides
- API key validation and masking
- get_config cache behavior
- AppConfig validation (debug only allowed in development)
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from vitals.config import (
    ApiConfig,
    AppConfig,
    PaginationConfig,
    RetryConfig,
    get_config,
    load_config_from_env,
    mask_secret,
    reset_config_cache,
)
from vitals.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clear_config_cache() -> Iterator[None]:
    """Ensure get_config cache is cleared before and after each test."""
    reset_config_cache()
    yield
    reset_config_cache()


def _set_minimal_valid_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set the minimal environment required for config to validate."""
    monkeypatch.setenv("HEALTH_API_KEY", "ak_test_key")


def test_load_config_dev_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_minimal_valid_env(monkeypatch)
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("HEALTH_API_BASE_URL", raising=False)
    monkeypatch.delenv("RETRY_MAX_ATTEMPTS", raising=False)
    monkeypatch.delenv("PAGE_SIZE", raising=False)

    config = load_config_from_env()

    assert config.environment == "development"
    assert config.debug is True
    assert config.logging.format == "console"
    assert config.api.base_url == "https://assessment.ksensetech.com/api"
    assert config.api.api_key == "ak_test_key"
    assert config.retry.max_attempts == 5
    assert config.retry.base_delay_seconds == 2.0
    assert config.retry.rate_limit_delay_seconds == 60.0
    assert config.pagination.page_size == 5


def test_production_uses_json_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_minimal_valid_env(monkeypatch)
    monkeypatch.setenv("ENVIRONMENT", "prod")

    config = load_config_from_env()

    assert config.environment == "production"
    assert config.debug is False
    assert config.logging.format == "json"


def test_retry_and_pagination_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_minimal_valid_env(monkeypatch)
    monkeypatch.setenv("RETRY_MAX_ATTEMPTS", "3")
    monkeypatch.setenv("RETRY_BASE_DELAY_SECONDS", "0.5")
    monkeypatch.setenv("RETRY_RATE_LIMIT_DELAY_SECONDS", "5")
    monkeypatch.setenv("PAGE_SIZE", "20")
    monkeypatch.setenv("HEALTH_API_BASE_URL", "https://patients.example/api/")

    config = load_config_from_env()

    assert config.retry.max_attempts == 3
    assert config.retry.base_delay_seconds == 0.5
    assert config.retry.rate_limit_delay_seconds == 5.0
    assert config.pagination.page_size == 20
    assert config.api.base_url == "https://patients.example/api"


def test_submit_results_boolean_parsing(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_minimal_valid_env(monkeypatch)

    monkeypatch.setenv("SUBMIT_RESULTS", "false")
    assert load_config_from_env().output.submit_results is False

    monkeypatch.setenv("SUBMIT_RESULTS", "yes")
    assert load_config_from_env().output.submit_results is True


def test_logging_level_literal_coercion(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_minimal_valid_env(monkeypatch)
    monkeypatch.setenv("ENVIRONMENT", "staging")

    # Unknown level should coerce to INFO
    monkeypatch.setenv("LOG_LEVEL", "unknown")
    config = load_config_from_env()
    assert config.logging.level == "INFO"

    # Known level should pass through
    monkeypatch.setenv("LOG_LEVEL", "error")
    config = load_config_from_env()
    assert config.logging.level == "ERROR"


@pytest.mark.parametrize("key", ["", "   ", "your-api-key-here"])
def test_missing_api_key_fails_fast(monkeypatch: pytest.MonkeyPatch, key: str) -> None:
    monkeypatch.setenv("HEALTH_API_KEY", key)

    with pytest.raises(ConfigurationError, match="HEALTH_API_KEY"):
        load_config_from_env()


def test_invalid_numeric_override_is_a_configuration_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _set_minimal_valid_env(monkeypatch)
    monkeypatch.setenv("RETRY_MAX_ATTEMPTS", "0")

    with pytest.raises(ConfigurationError):
        load_config_from_env()

    monkeypatch.setenv("RETRY_MAX_ATTEMPTS", "many")

    with pytest.raises(ConfigurationError):
        load_config_from_env()


def test_get_config_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_minimal_valid_env(monkeypatch)

    c1 = get_config()
    c2 = get_config()
    assert c1 is c2  # same object due to lru_cache

    reset_config_cache()
    assert get_config() is not c1


def test_page_size_bounds() -> None:
    with pytest.raises(ValueError):
        PaginationConfig(page_size=0)
    with pytest.raises(ValueError):
        PaginationConfig(page_size=21)


def test_retry_config_rejects_zero_attempts() -> None:
    with pytest.raises(ValueError):
        RetryConfig(max_attempts=0)


def test_mask_secret() -> None:
    assert mask_secret("ak_1234567890") == "*********7890"
    assert mask_secret("abc") == "***"


def test_app_config_debug_only_in_dev_validation() -> None:
    api = ApiConfig(api_key="ak_test_key")

    with pytest.raises(ValueError, match="debug mode is only allowed"):
        AppConfig(environment="production", debug=True, api=api)
