"""Pytest configuration for avfeed test suite."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

import httpx
import pytest

from avfeed.core.config import ConnectorConfig
from avfeed.core.http_adapter import HttpConfig, HttpFetcher
from avfeed.core.interfaces import FixedClock
from avfeed.core.services.history import HistoryService

NOW = datetime(2021, 7, 29, 12, 0, 0)


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line options for controlling integration tests."""

    parser.addoption(
        "--avfeed-run-integration",
        action="store_true",
        default=False,
        help="Run avfeed integration tests that require the live Alpha Vantage API.",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register the integration marker for avfeed tests."""

    config.addinivalue_line(
        "markers",
        "integration: marks avfeed tests requiring network access",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly requested."""

    if config.getoption("--avfeed-run-integration"):
        return

    avfeed_skip_integration = pytest.mark.skip(
        reason="integration tests require --avfeed-run-integration",
    )
    for avfeed_item in items:
        if "integration" in avfeed_item.keywords:
            avfeed_item.add_marker(avfeed_skip_integration)


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def connector_config() -> ConnectorConfig:
    return ConnectorConfig(api_key="demo")


@pytest.fixture
def make_service(fixed_clock: FixedClock) -> Callable[..., HistoryService]:
    """Build a :class:`HistoryService` whose HTTP calls go to ``handler``."""

    def _make(handler: Callable[[httpx.Request], Any]) -> HistoryService:
        def factory(config: ConnectorConfig) -> HttpFetcher:
            return HttpFetcher(HttpConfig.from_connector(config), transport=httpx.MockTransport(handler))

        return HistoryService(fetcher_factory=factory, clock=fixed_clock)

    return _make


