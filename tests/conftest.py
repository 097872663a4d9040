"""Pytest configuration and shared fixtures.

Usage Guide:
- For commit/config data: import factories from tests.factories
- For engine and replay tests: use the mock_client fixture (or
  make_mock_client for custom commit data), which records GitHub calls
  in order on client.calls
"""

from collections.abc import Iterator
from datetime import UTC, datetime

import pytest

from repoverse.config import get_settings
from repoverse.logging import reset_logging

# -----------------------------------------------------------------------------
# Test Timeline Constants
#
# A consistent "test epoch" so commit ordering assertions are deterministic.
# -----------------------------------------------------------------------------
JAN_10 = datetime(2024, 1, 10, 9, 0, 0, tzinfo=UTC)
JAN_11 = datetime(2024, 1, 11, 9, 0, 0, tzinfo=UTC)
JAN_12 = datetime(2024, 1, 12, 9, 0, 0, tzinfo=UTC)
JAN_13 = datetime(2024, 1, 13, 9, 0, 0, tzinfo=UTC)
JAN_14 = datetime(2024, 1, 14, 9, 0, 0, tzinfo=UTC)

JAN_10_ISO = "2024-01-10T09:00:00Z"
JAN_11_ISO = "2024-01-11T09:00:00+00:00"


# -----------------------------------------------------------------------------
# Settings & Logging Isolation
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Give every test a fresh settings cache with a dummy token."""
    monkeypatch.setenv("GITHUB_TOKEN", "test-token")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _quiet_logging() -> Iterator[None]:
    """Drop loguru's default stderr handler so test output stays clean."""
    reset_logging()
    yield
    reset_logging()


# -----------------------------------------------------------------------------
# Utility Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def utc_now() -> datetime:
    """Current UTC datetime for tests."""
    return datetime.now(UTC)
