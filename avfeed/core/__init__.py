"""Core package."""

from avfeed.core.client import AlphaVantageClient
from avfeed.core.config import ConnectorConfig
from avfeed.core.models import AggregationPeriod, TimeSeriesRecord

__all__ = [
    "AlphaVantageClient",
    "AggregationPeriod",
    "ConnectorConfig",
    "TimeSeriesRecord",
]
