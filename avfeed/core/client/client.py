"""avfeed主客户端 - 提供同步和异步接口"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from datetime import date, datetime
from typing import Any, Iterable

from pydantic import ValidationError

from avfeed.core.config import ConfigManager, ConnectorConfig
from avfeed.core.exceptions import AuthenticationError, AvfeedError, DataValidationError
from avfeed.core.formatting import format_records, format_series
from avfeed.core.logging import configure_logging
from avfeed.core.models import DAILY_PERIODICITY, HistoryRequest
from avfeed.core.services.history import HistoryService

DateLike = date | datetime | str | None

VERIFY_SYMBOL = "MSFT"


class AlphaVantageClient:
    """Alpha Vantage connector holding an immutable configuration."""

    def __init__(
        self,
        config: ConnectorConfig | None = None,
        *,
        service: HistoryService | None = None,
        **options: Any,
    ) -> None:
        """初始化客户端

        Args:
            config: 连接器配置; 为None时从配置文件和环境变量加载
            service: 可选的编排服务 (用于注入fetcher或时钟)
            **options: 覆盖配置项 (api_key, timeout, url, adjusted, ...)
        """
        if config is None:
            manager = ConfigManager()
            config = manager.connector_config(**options)
            configure_logging(**manager.logging_config().model_dump())
        elif options:
            config = config.with_options(**options)
        self.config = config
        self.service = service or HistoryService()

    def with_options(self, **changes: Any) -> AlphaVantageClient:
        """Return a client sharing this service with an updated configuration."""
        return AlphaVantageClient(self.config.with_options(**changes), service=self.service)

    async def history_async(
        self,
        symbol: str,
        start: DateLike = None,
        end: DateLike = None,
        periodicity: str = DAILY_PERIODICITY,
    ) -> Any:
        """Historic OHLCV bars for one symbol.

        Args:
            symbol: 单个证券代码
            start: 最早的bar日期/时间
            end: 最晚的bar日期/时间 (纯日期包含当天全部数据)
            periodicity: 1min, 5min, 15min, 30min, 60min, day, week, month, quarter, year

        Returns:
            TimeSeries 或 pandas DataFrame (取决于 output_format)
        """
        try:
            request = HistoryRequest(symbol=symbol, start=start, end=end, periodicity=periodicity)
        except ValidationError as exc:
            raise DataValidationError(
                "Invalid history request",
                validation_errors={".".join(map(str, error["loc"])): error["msg"] for error in exc.errors()},
            ) from exc
        series = await self.service.fetch_history(request, self.config)
        return format_series(series, self.config.output_format)

    def history(
        self,
        symbol: str,
        start: DateLike = None,
        end: DateLike = None,
        periodicity: str = DAILY_PERIODICITY,
    ) -> Any:
        """同步获取历史数据"""
        return self._run_sync(self.history_async(symbol, start, end, periodicity))

    async def quotes_async(self, symbols: str | Iterable[str]) -> Any:
        """Latest quote for one or more symbols (``"IBM,FB"`` or a list)."""
        records = await self.service.fetch_quotes(symbols, self.config)
        return format_records(records, self.config.output_format)

    def quotes(self, symbols: str | Iterable[str]) -> Any:
        """同步获取最新报价"""
        return self._run_sync(self.quotes_async(symbols))

    async def verify_async(self) -> None:
        """Check the API key by requesting a single quote."""
        try:
            await self.service.fetch_quotes([VERIFY_SYMBOL], self.config)
        except AvfeedError as exc:
            raise AuthenticationError(
                "Cannot connect to Alpha Vantage using the specified API key. "
                "Please visit https://www.alphavantage.co/support/#api-key to get a valid API key.",
                details={"cause": exc.message},
            ) from exc

    def verify(self) -> None:
        self._run_sync(self.verify_async())

    def _run_sync(self, coro: Coroutine[Any, Any, Any]) -> Any:
        """运行异步协程的同步包装器"""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(coro)
        coro.close()
        raise RuntimeError("An event loop is already running; use the *_async methods instead")


__all__ = ["AlphaVantageClient"]
