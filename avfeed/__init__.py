"""avfeed - Alpha Vantage market data connector

把Alpha Vantage的松散响应规范化为统一的时间序列记录,
支持分片的日内历史数据与合成周期 (周/月/季/年) 聚合。
"""

from typing import Any, Iterable

from avfeed.core.client.client import AlphaVantageClient, DateLike
from avfeed.core.config import ConnectorConfig
from avfeed.core.exceptions import (
    AvfeedError,
    MalformedTimestampError,
    UpstreamError,
)
from avfeed.core.models import AggregationPeriod, TimeSeriesRecord
from avfeed.core.services import aggregate, build_time_series, filter_range, parse_response, plan_slices

# 全局客户端实例
_client: AlphaVantageClient | None = None


def get_client() -> AlphaVantageClient:
    """获取全局avfeed客户端实例"""
    global _client
    if _client is None:
        _client = AlphaVantageClient()
    return _client


def configure(**options: Any) -> AlphaVantageClient:
    """配置全局客户端

    Args:
        **options: 连接器配置项 (api_key, timeout, url, adjusted, use_parallel,
            max_items, output_format, slice_padding)
    """
    global _client
    _client = get_client().with_options(**options) if _client is not None else AlphaVantageClient(**options)
    return _client


def history(
    symbol: str,
    start: DateLike = None,
    end: DateLike = None,
    periodicity: str = "day",
) -> Any:
    """同步获取历史OHLCV数据

    Examples:
        >>> import avfeed
        >>> avfeed.configure(api_key="demo")
        >>> bars = avfeed.history("IBM", "2021-06-01", "2021-07-29", "week")
    """
    return get_client().history(symbol, start, end, periodicity)


def quotes(symbols: str | Iterable[str]) -> Any:
    """同步获取最新报价

    Examples:
        >>> import avfeed
        >>> avfeed.quotes("IBM,FB,TSLA")
    """
    return get_client().quotes(symbols)


# 版本信息
__version__ = "0.1.0"

__all__ = [
    "AggregationPeriod",
    "AlphaVantageClient",
    "AvfeedError",
    "ConnectorConfig",
    "MalformedTimestampError",
    "TimeSeriesRecord",
    "UpstreamError",
    "aggregate",
    "build_time_series",
    "configure",
    "filter_range",
    "get_client",
    "history",
    "parse_response",
    "plan_slices",
    "quotes",
]
