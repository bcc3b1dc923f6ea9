"""
Unit tests for the Yahoo Finance price provider.
Network calls are served by an httpx.MockTransport.
"""

from collections.abc import Callable

import httpx
import pytest

from smart_invest.config import Settings
from smart_invest.core.exceptions.portfolio import ProviderError
from smart_invest.infrastructure.market_data import YahooFinancePriceProvider

CHART_URL = "https://chart.test/v8/finance/chart/"
SEARCH_URL = "https://search.test/v1/finance/search"


def chart_response(*metas: dict, **extra) -> dict:
    return {"chart": {"result": [{"meta": meta, **extra} for meta in metas], "error": None}}


def make_provider(handler: Callable[[httpx.Request], httpx.Response]) -> YahooFinancePriceProvider:
    settings = Settings(chart_url=CHART_URL, search_url=SEARCH_URL)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return YahooFinancePriceProvider(settings=settings, client=client, fallback_delay=0)


class TestCurrentPrice:
    """Test single-symbol quotes."""

    @pytest.mark.asyncio
    async def test_should_return_regular_market_price(self) -> None:
        """Test quote parsing and symbol normalization."""
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(request.url.path)
            return httpx.Response(
                200, json=chart_response({"symbol": "AAPL", "regularMarketPrice": 189.5})
            )

        provider = make_provider(handler)
        quote = await provider.get_current_price("aapl")

        assert quote.symbol == "AAPL"
        assert quote.price == 189.5
        assert quote.source == "Yahoo Finance"
        assert requested == ["/v8/finance/chart/AAPL"]

    @pytest.mark.asyncio
    async def test_should_fall_back_to_previous_close(self) -> None:
        """Test previousClose is used when the market price is absent."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=chart_response({"symbol": "AAPL", "previousClose": 180.0}))

        quote = await make_provider(handler).get_current_price("AAPL")
        assert quote.price == 180.0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, json={"chart": {"result": None, "error": {"description": "No data found"}}}),
            httpx.Response(200, json={"chart": {"result": [], "error": None}}),
            httpx.Response(200, json={"chart": {"result": [None], "error": None}}),
            httpx.Response(200, json={"chart": {"result": ["AAPL"], "error": None}}),
            httpx.Response(200, json={"chart": {"result": [{"meta": "AAPL"}], "error": None}}),
            httpx.Response(200, json={"chart": {"result": {"meta": {}}, "error": None}}),
            httpx.Response(200, json=chart_response({"symbol": "ZZZZ", "regularMarketPrice": 0})),
            httpx.Response(200, content=b"<html>not json</html>"),
            httpx.Response(404, json={}),
        ],
    )
    async def test_should_raise_provider_error_on_bad_response(self, response) -> None:
        """Test every failure shape surfaces as ProviderError."""
        provider = make_provider(lambda request: response)

        with pytest.raises(ProviderError):
            await provider.get_current_price("ZZZZ")

    @pytest.mark.asyncio
    async def test_should_raise_provider_error_on_network_failure(self) -> None:
        """Test transport errors are wrapped."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ProviderError, match="Network error"):
            await make_provider(handler).get_current_price("AAPL")

    @pytest.mark.asyncio
    async def test_should_validate_symbol_by_fetching_price(self) -> None:
        """Test validate_symbol maps provider failures to False."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("AAPL"):
                return httpx.Response(200, json=chart_response({"regularMarketPrice": 1.0}))
            return httpx.Response(404, json={})

        provider = make_provider(handler)
        assert await provider.validate_symbol("AAPL") is True
        assert await provider.validate_symbol("NOPE") is False


class TestBatchPrices:
    """Test best-effort batch lookups."""

    @pytest.mark.asyncio
    async def test_should_use_single_batch_request(self) -> None:
        """Test batch response maps every symbol."""
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(request.url.path)
            return httpx.Response(
                200,
                json=chart_response(
                    {"symbol": "AAPL", "regularMarketPrice": 190.0},
                    {"symbol": "MSFT", "regularMarketPrice": 410.0},
                ),
            )

        result = await make_provider(handler).get_batch_prices(["aapl", "MSFT", "AAPL"])

        assert result.prices == {"AAPL": 190.0, "MSFT": 410.0}
        assert result.complete
        assert len(requested) == 1
        assert requested[0].endswith("AAPL,MSFT")

    @pytest.mark.asyncio
    async def test_should_record_symbols_missing_from_batch(self) -> None:
        """Test a partial batch response reports the gaps."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, json=chart_response({"symbol": "AAPL", "regularMarketPrice": 190.0})
            )

        result = await make_provider(handler).get_batch_prices(["AAPL", "MSFT"])

        assert result.prices == {"AAPL": 190.0}
        assert set(result.failures) == {"MSFT"}
        assert not result.complete

    @pytest.mark.asyncio
    async def test_should_record_failures_for_malformed_batch_entries(self) -> None:
        """Test null or non-object entries are skipped rather than raised."""
        payload = {
            "chart": {
                "result": [
                    None,
                    "junk",
                    {"meta": None},
                    {"meta": {"symbol": "AAPL", "regularMarketPrice": 190.0}},
                ],
                "error": None,
            }
        }

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=payload)

        result = await make_provider(handler).get_batch_prices(["AAPL", "MSFT"])

        assert result.prices == {"AAPL": 190.0}
        assert set(result.failures) == {"MSFT"}

    @pytest.mark.asyncio
    async def test_should_report_every_symbol_when_all_entries_are_null(self) -> None:
        """Test a batch of null entries returns failures for all symbols."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"chart": {"result": [None], "error": None}})

        result = await make_provider(handler).get_batch_prices(["AAPL", "MSFT"])

        assert result.prices == {}
        assert set(result.failures) == {"AAPL", "MSFT"}

    @pytest.mark.asyncio
    async def test_should_fall_back_to_individual_requests(self) -> None:
        """Test per-symbol fallback when the batch call fails."""
        prices = {"AAPL": 190.0, "MSFT": 410.0}

        def handler(request: httpx.Request) -> httpx.Response:
            symbol = request.url.path.rsplit("/", 1)[-1]
            if "," in symbol:
                return httpx.Response(500, json={})
            if symbol not in prices:
                return httpx.Response(404, json={})
            return httpx.Response(
                200, json=chart_response({"symbol": symbol, "regularMarketPrice": prices[symbol]})
            )

        result = await make_provider(handler).get_batch_prices(["AAPL", "MSFT", "GONE"])

        assert result.prices == prices
        assert set(result.failures) == {"GONE"}

    @pytest.mark.asyncio
    async def test_should_return_empty_result_for_no_symbols(self) -> None:
        """Test no request is made for an empty list."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        result = await make_provider(handler).get_batch_prices([])
        assert result.prices == {}
        assert result.complete


class TestHistoryAndSearch:
    """Test historical prices and symbol search."""

    @pytest.mark.asyncio
    async def test_should_return_daily_closes_skipping_nulls(self) -> None:
        """Test history parsing."""
        params = {}

        def handler(request: httpx.Request) -> httpx.Response:
            params.update(request.url.params)
            return httpx.Response(
                200,
                json=chart_response(
                    {"symbol": "AAPL"},
                    timestamp=[1704153600, 1704240000, 1704326400],
                    indicators={"quote": [{"close": [185.6, None, 184.2]}]},
                ),
            )

        history = await make_provider(handler).get_historical_prices("AAPL", "1mo")

        assert [q.price for q in history] == [185.6, 184.2]
        assert history[0].timestamp < history[1].timestamp
        assert params["interval"] == "1d"
        assert int(params["period2"]) > int(params["period1"])

    @pytest.mark.asyncio
    async def test_should_raise_provider_error_for_malformed_history(self) -> None:
        """Test a null history entry surfaces as ProviderError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"chart": {"result": [None], "error": None}})

        with pytest.raises(ProviderError, match="Malformed historical data"):
            await make_provider(handler).get_historical_prices("AAPL")

    @pytest.mark.asyncio
    async def test_should_keep_only_listed_equities_in_search(self) -> None:
        """Test search filtering."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["q"] == "apple"
            return httpx.Response(
                200,
                json={
                    "quotes": [
                        {"symbol": "AAPL", "shortname": "Apple Inc.", "typeDisp": "Equity", "exchDisp": "NASDAQ"},
                        {"symbol": "APLE", "longname": "Apple Hospitality", "typeDisp": "Equity", "exchDisp": "NYSE"},
                        {"symbol": "AAPL240119C", "typeDisp": "Option", "exchDisp": "OPR"},
                        {"symbol": "XAPL", "typeDisp": "Equity"},
                    ]
                },
            )

        results = await make_provider(handler).search_symbols("apple")

        assert results == [
            {"symbol": "AAPL", "name": "Apple Inc."},
            {"symbol": "APLE", "name": "Apple Hospitality"},
        ]


class TestClientLifecycle:
    """Test client ownership."""

    @pytest.mark.asyncio
    async def test_should_close_owned_client(self) -> None:
        """Test the provider closes a client it created."""
        async with YahooFinancePriceProvider(settings=Settings()) as provider:
            client = await provider._get_client()
            assert not client.is_closed
        assert client.is_closed

    @pytest.mark.asyncio
    async def test_should_not_close_injected_client(self) -> None:
        """Test an injected client is left to its owner."""
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        provider = YahooFinancePriceProvider(settings=Settings(), client=client)

        await provider.aclose()

        assert not client.is_closed
        await client.aclose()
