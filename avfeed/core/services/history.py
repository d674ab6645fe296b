"""History and quote orchestration over the normalization pipeline."""

from __future__ import annotations

import asyncio
import re
from typing import Any, Awaitable, Callable, Iterable, Mapping, Sequence

from avfeed.core.config import ConnectorConfig
from avfeed.core.exceptions import AvfeedError, DataValidationError, UpstreamError
from avfeed.core.http_adapter import HttpConfig, HttpFetcher
from avfeed.core.interfaces import Clock, Fetcher, SystemClock
from avfeed.core.logging import get_logger, log_context
from avfeed.core.models import (
    DAILY_PERIODICITY,
    Endpoint,
    HistoryRequest,
    NormalizedRecord,
    TimeSeries,
    is_intraday,
    synthetic_period,
)
from avfeed.core.services.normalization import parse_csv, parse_response
from avfeed.core.services.resampling import aggregate, filter_range
from avfeed.core.services.slicing import plan_slices

logger = get_logger(__name__)

FetcherFactory = Callable[[ConnectorConfig], HttpFetcher]

_SYMBOL_SEPARATORS = re.compile(r"[,\s]+")


def default_fetcher_factory(config: ConnectorConfig) -> HttpFetcher:
    return HttpFetcher(HttpConfig.from_connector(config))


def parse_symbols(symbols: str | Iterable[str]) -> list[str]:
    """Split ``"IBM,FB TSLA"`` style input into a list of symbols."""
    if isinstance(symbols, str):
        parsed = _SYMBOL_SEPARATORS.split(symbols)
    else:
        parsed = [str(symbol) for symbol in symbols]
    parsed = [symbol.strip() for symbol in parsed if symbol and symbol.strip()]
    if not parsed:
        raise DataValidationError("At least one symbol must be specified", validation_errors={"symbols": symbols})
    return parsed


async def gather_in_order(calls: Sequence[Callable[[], Awaitable[Any]]], parallel: bool) -> list[Any]:
    """Run ``calls`` and return their results in call order.

    The first failure aborts the whole batch; in parallel mode the calls still
    running are cancelled before it propagates.
    """
    if parallel and len(calls) > 1:
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(call()) for call in calls]
        except ExceptionGroup as failures:
            raise failures.exceptions[0]
        return [task.result() for task in tasks]
    return [await call() for call in calls]


class HistoryService:
    """Builds upstream queries, dispatches them and post-processes the results."""

    def __init__(self, fetcher_factory: FetcherFactory | None = None, clock: Clock | None = None) -> None:
        self.fetcher_factory = fetcher_factory or default_fetcher_factory
        self.clock = clock or SystemClock()

    def build_history_params(self, request: HistoryRequest, config: ConnectorConfig) -> tuple[dict[str, str], list[str]]:
        """Return the shared query parameters and the slice list (``[]`` means one unsliced call)."""
        periodicity = request.periodicity
        params = {
            "function": "",
            "apikey": config.api_key,
            "interval": periodicity,
            "outputsize": self._output_size(periodicity, config),
            "symbol": request.symbol,
            "datatype": "csv",
        }
        if is_intraday(periodicity):
            params["function"] = Endpoint.INTRADAY_EXTENDED.value
            params["adjusted"] = str(config.adjusted).lower()
            slices = plan_slices(request.start, request.end, clock=self.clock, padding=config.slice_padding)
        else:
            endpoint = Endpoint.DAILY_ADJUSTED if config.adjusted else Endpoint.DAILY
            params["function"] = endpoint.value
            slices = []
        return params, slices

    @staticmethod
    def _output_size(periodicity: str, config: ConnectorConfig) -> str:
        if config.max_items > 100 or periodicity == DAILY_PERIODICITY or synthetic_period(periodicity):
            return "full"
        return "compact"

    async def fetch_history(self, request: HistoryRequest, config: ConnectorConfig) -> TimeSeries:
        """Fetch, filter and (for synthetic periods) aggregate OHLCV bars."""
        params, slices = self.build_history_params(request, config)
        param_sets = [{**params, "slice": window} for window in slices] or [params]

        with log_context(provider="alpha_vantage", symbol=request.symbol, endpoint=params["function"]):
            logger.info("Fetching history", periodicity=request.periodicity, calls=len(param_sets))
            try:
                async with self.fetcher_factory(config) as fetcher:
                    payloads = await self._fetch_all(fetcher, param_sets, config.use_parallel)
                series: TimeSeries = []
                for payload in payloads:
                    series.extend(parse_csv(payload))
            except AvfeedError as exc:
                logger.error("History request failed: {}", exc.message, error_code=exc.error_code)
                raise

            series = filter_range(series, request.start, request.end)
            period = synthetic_period(request.periodicity)
            if period is not None:
                series = aggregate(series, period)
            logger.debug("History request complete", records=len(series))
            return series[: config.max_items]

    async def fetch_quotes(self, symbols: str | Iterable[str], config: ConnectorConfig) -> list[NormalizedRecord]:
        """Fetch the latest quote of every symbol, in request order."""
        symbol_list = parse_symbols(symbols)
        param_sets = [
            {"function": Endpoint.GLOBAL_QUOTE.value, "apikey": config.api_key, "symbol": symbol} for symbol in symbol_list
        ]

        with log_context(provider="alpha_vantage", endpoint=Endpoint.GLOBAL_QUOTE.value):
            logger.info("Fetching quotes", symbols=symbol_list)
            try:
                async with self.fetcher_factory(config) as fetcher:
                    payloads = await self._fetch_all(fetcher, param_sets, config.use_parallel)
                records = [self._parse_quote(payload) for payload in payloads]
            except AvfeedError as exc:
                logger.error("Quote request failed: {}", exc.message, error_code=exc.error_code)
                raise
            return records[: config.max_items]

    @staticmethod
    def _parse_quote(payload: str | Mapping[str, Any]) -> NormalizedRecord:
        if isinstance(payload, str):
            raise UpstreamError(payload.strip() or "Empty response from Alpha Vantage")
        return parse_response(payload)

    @staticmethod
    async def _fetch_all(fetcher: Fetcher, param_sets: list[dict[str, str]], parallel: bool) -> list[Any]:
        calls = [lambda params=params: fetcher.fetch(params) for params in param_sets]
        return await gather_in_order(calls, parallel)


__all__ = ["HistoryService", "default_fetcher_factory", "gather_in_order", "parse_symbols"]
