"""Shared fixtures for the vitals pipeline tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from fakes import RecordingSleep

from vitals.config import ApiConfig, AppConfig, OutputConfig, PaginationConfig, RetryConfig


@pytest.fixture
def api_config() -> ApiConfig:
    return ApiConfig(base_url="https://patients.example/api", api_key="test-key")


@pytest.fixture
def retry_config() -> RetryConfig:
    return RetryConfig()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def app_config(api_config: ApiConfig, tmp_path: Path) -> AppConfig:
    return AppConfig(
        environment="development",
        api=api_config,
        retry=RetryConfig(),
        pagination=PaginationConfig(page_size=5),
        output=OutputConfig(evaluated_records_path=str(tmp_path / "evaluated.json")),
    )
