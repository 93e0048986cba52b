"""Pytest configuration and fixtures."""

from collections.abc import Callable, Iterator
from datetime import datetime, timezone

import pytest
import structlog

from restheader.common.settings import Settings, get_settings

FIXED_NOW = datetime(2024, 3, 5, 14, 7, 9, 123456, tzinfo=timezone.utc)
FIXED_SIGNED_DATE = "2024-03-05T14:07:09.123Z"


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        api_version=None,
        log_level="WARNING",
        log_format="console",
        signature_max_age_seconds=300.0,
    )


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from RESTHEADER_* variables and the cached Settings."""
    for name in ("API_VERSION", "LOG_LEVEL", "LOG_FORMAT", "SIGNATURE_MAX_AGE_SECONDS"):
        monkeypatch.delenv(f"RESTHEADER_{name}", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fixed_signed_date() -> str:
    """Signed date rendered from FIXED_NOW."""
    return FIXED_SIGNED_DATE


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop structlog configuration bound to per-test capture streams."""
    yield
    structlog.reset_defaults()
