"""
Tests for the Alpha Vantage client facade.

The client is exercised end to end against an in-memory transport so that
request validation, orchestration and output formatting are covered together.
"""

from datetime import date
from decimal import Decimal

import httpx
import pandas as pd
import pytest

import avfeed
from avfeed.core.client import AlphaVantageClient
from avfeed.core.config import ConnectorConfig
from avfeed.core.exceptions import AuthenticationError, DataValidationError, UpstreamError

DAILY_CSV = (
    "timestamp,open,high,low,close,volume\r\n"
    "2021-07-29,142.33,142.96,141.60,141.93,2657669\r\n"
    "2021-07-28,141.58,143.15,141.50,141.77,2896125\r\n"
)


def handler(request: httpx.Request) -> httpx.Response:
    if request.url.params["function"] == "GLOBAL_QUOTE":
        symbol = request.url.params["symbol"]
        return httpx.Response(200, json={"Global Quote": {"01. symbol": symbol, "05. price": "141.9300"}})
    return httpx.Response(200, text=DAILY_CSV, headers={"content-type": "application/x-download"})


@pytest.fixture
def client(make_service, connector_config):
    return AlphaVantageClient(connector_config, service=make_service(handler))


class TestAlphaVantageClient:
    """Test AlphaVantageClient class."""

    def test_options_override_config(self, connector_config):
        client = AlphaVantageClient(connector_config, max_items=5)

        assert client.config.max_items == 5
        assert client.config.api_key == "demo"

    def test_with_options_shares_service(self, client):
        updated = client.with_options(output_format="frame")

        assert updated.service is client.service
        assert updated.config.output_format == "frame"
        assert client.config.output_format == "records"

    def test_history(self, client):
        series = client.history("IBM", "2021-07-29", "2021-07-29")

        assert [bar.timestamp for bar in series] == [date(2021, 7, 29)]
        assert series[0]["close"] == Decimal("141.93")

    def test_history_as_frame(self, client):
        frame = client.with_options(output_format="frame").history("IBM")

        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == ["open", "high", "low", "close", "volume"]
        assert len(frame) == 2

    @pytest.mark.parametrize("symbol", ["", "IBM,FB"])
    def test_invalid_history_request(self, client, symbol):
        with pytest.raises(DataValidationError) as excinfo:
            client.history(symbol)

        assert "symbol" in excinfo.value.validation_errors

    def test_quotes(self, client):
        records = client.quotes("IBM,FB")

        assert [record["Symbol"] for record in records] == ["IBM", "FB"]
        assert records[1]["Price"] == Decimal("141.9300")

    def test_quotes_as_frame(self, client):
        frame = client.with_options(output_format="frame").quotes(["IBM"])

        assert list(frame["Symbol"]) == ["IBM"]
        assert frame["Price"].iloc[0] == pytest.approx(141.93)

    def test_verify_succeeds(self, client):
        client.verify()

    def test_verify_wraps_upstream_failure(self, make_service, connector_config):
        message = "the parameter apikey is invalid or missing."
        service = make_service(lambda request: httpx.Response(200, json={"Error Message": message}))
        client = AlphaVantageClient(connector_config, service=service)

        with pytest.raises(AuthenticationError) as excinfo:
            client.verify()

        assert isinstance(excinfo.value.__cause__, UpstreamError)
        assert excinfo.value.details["cause"] == message

    @pytest.mark.asyncio
    async def test_sync_call_inside_event_loop_is_rejected(self, client):
        with pytest.raises(RuntimeError, match="_async"):
            client.quotes("IBM")

    @pytest.mark.asyncio
    async def test_async_methods(self, client):
        records = await client.quotes_async("IBM")
        series = await client.history_async("IBM", periodicity="month")

        assert records[0]["Symbol"] == "IBM"
        assert [bar.timestamp for bar in series] == [date(2021, 7, 29)]
        assert series[0]["open"] == Decimal("141.58")
        assert series[0]["volume"] == Decimal("5553794")


class TestModuleInterface:
    """Test the module-level convenience functions."""

    def test_history_and_quotes_use_global_client(self, monkeypatch, client):
        monkeypatch.setattr(avfeed, "_client", client)

        assert avfeed.get_client() is client
        assert avfeed.history("IBM")[0].timestamp == date(2021, 7, 29)
        assert avfeed.quotes("IBM")[0]["Symbol"] == "IBM"

    def test_configure_updates_global_client(self, monkeypatch, client):
        monkeypatch.setattr(avfeed, "_client", client)

        configured = avfeed.configure(max_items=1)

        assert avfeed.get_client() is configured
        assert configured.config.max_items == 1
        assert configured.service is client.service

    def test_configure_without_client(self, monkeypatch):
        monkeypatch.setattr(avfeed, "_client", None)
        monkeypatch.setenv("HOME", "/nonexistent-avfeed-home")

        configured = avfeed.configure(api_key="demo", use_parallel=True)

        assert isinstance(configured.config, ConnectorConfig)
        assert configured.config.use_parallel is True
