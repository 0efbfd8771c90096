"""Shared pytest configuration and fixtures."""

import json
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

from opentelemetry.sdk.metrics.export import InMemoryMetricReader

from usage_metrics.config.models import TelemetryConfig
from usage_metrics.services.telemetry import Telemetry
from usage_metrics.utils.logger import setup_logger


NOW = datetime(2025, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed current instant."""
    return NOW


@pytest.fixture
def clock():
    """Clock returning the fixed instant."""
    return lambda: NOW


@pytest.fixture
def logger():
    """Create logger for tests."""
    return setup_logger("test")


@pytest.fixture
def metric_reader():
    """In-memory reader collecting every recorded gauge sample."""
    return InMemoryMetricReader()


@pytest.fixture
def telemetry(metric_reader, logger):
    """Telemetry handle backed by the in-memory reader."""
    handle = Telemetry(TelemetryConfig(), logger, readers=[metric_reader])
    yield handle
    handle.shutdown()


@pytest.fixture
def recorder(telemetry):
    """Gauge recorder of the test telemetry handle."""
    return telemetry.recorder


@pytest.fixture
def cookie_client():
    """Cookie client stub returning a fixed session cookie."""
    client = Mock()
    client.get_cookies = AsyncMock(return_value="sessionKey=sk-test")
    return client


def gauge_points(reader, gauge_name):
    """
    Read the latest value of each metric_name series of a gauge.

    Returns:
        dict: metric_name attribute -> gauge value
    """
    data = reader.get_metrics_data()
    points = {}
    if data is None:
        return points
    for resource_metrics in data.resource_metrics:
        for scope_metrics in resource_metrics.scope_metrics:
            for metric in scope_metrics.metrics:
                if metric.name != gauge_name:
                    continue
                for point in metric.data.data_points:
                    points[point.attributes["metric_name"]] = point.value
    return points


def json_response(payload, status_code=200):
    """Mock httpx response with a JSON body."""
    response = Mock()
    response.status_code = status_code
    response.text = json.dumps(payload) if not isinstance(payload, str) else payload
    return response


def mock_http_client(mock_client_class, response=None):
    """Wire a patched httpx.AsyncClient so ``async with`` yields a mock client."""
    mock_client = AsyncMock()
    mock_client_class.return_value.__aenter__.return_value = mock_client
    if response is not None:
        mock_client.get.return_value = response
    return mock_client
