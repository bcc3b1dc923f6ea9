"""
Yahoo Finance price provider.

Wraps the public chart endpoint
(https://query1.finance.yahoo.com/v8/finance/chart/{SYMBOL}) and the symbol
search endpoint. No authentication; no retries. A failed quote raises
ProviderError, a failed batch entry is recorded in the BatchPriceResult.
"""

import asyncio
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
from loguru import logger

from smart_invest.config import Settings, get_settings
from smart_invest.core.constants import FALLBACK_REQUEST_DELAY_SECONDS, PRICE_SOURCE_YAHOO
from smart_invest.core.exceptions.portfolio import ProviderError
from smart_invest.core.interfaces.providers import PriceProvider
from smart_invest.core.models.market import BatchPriceResult, PriceQuote
from smart_invest.core.utils.validation import validate_symbol as normalize_symbol

# Lookback per history period; None means "from the epoch"
HISTORY_PERIODS: dict[str, timedelta | None] = {
    "1d": timedelta(days=1),
    "5d": timedelta(days=5),
    "1mo": timedelta(days=30),
    "3mo": timedelta(days=90),
    "6mo": timedelta(days=180),
    "1y": timedelta(days=365),
    "2y": timedelta(days=2 * 365),
    "5y": timedelta(days=5 * 365),
    "10y": timedelta(days=10 * 365),
    "ytd": timedelta(0),  # resolved against Jan 1 at call time
    "max": None,
}


def _extract_price(meta: Any) -> float | None:
    """Regular market price, falling back to the previous close."""
    if not isinstance(meta, dict):
        return None
    price = meta.get("regularMarketPrice") or meta.get("previousClose")
    if isinstance(price, int | float) and not isinstance(price, bool) and price > 0:
        return float(price)
    return None


def _period_start(period: str, now: datetime) -> datetime:
    if period not in HISTORY_PERIODS:
        period = "1y"
    if period == "ytd":
        return datetime(now.year, 1, 1, tzinfo=UTC)
    lookback = HISTORY_PERIODS[period]
    if lookback is None:
        return datetime.fromtimestamp(0, tz=UTC)
    return now - lookback


class YahooFinancePriceProvider(PriceProvider):
    """
    Async client for Yahoo Finance quotes.

    Usable as an async context manager; otherwise call ``aclose()`` when done.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
        fallback_delay: float = FALLBACK_REQUEST_DELAY_SECONDS,
    ) -> None:
        self.settings = settings or get_settings()
        self._client = client
        self._owns_client = client is None
        self.fallback_delay = fallback_delay

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.settings.quote_timeout_seconds,
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "YahooFinancePriceProvider":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _get_chart(
        self, symbol_param: str, timeout: float, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """GET the chart endpoint and return its ``chart`` object."""
        client = await self._get_client()
        try:
            response = await client.get(
                f"{self.settings.chart_url}{symbol_param}", params=params, timeout=timeout
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise ProviderError(
                f"Network error fetching price for {symbol_param}: {e}", symbol=symbol_param
            ) from e
        except ValueError as e:
            raise ProviderError(
                f"Invalid response from {PRICE_SOURCE_YAHOO} for {symbol_param}",
                symbol=symbol_param,
            ) from e

        chart = data.get("chart") if isinstance(data, dict) else None
        if not isinstance(chart, dict):
            raise ProviderError(f"No data returned from {PRICE_SOURCE_YAHOO}", symbol=symbol_param)
        error = chart.get("error")
        if error:
            description = error.get("description") if isinstance(error, dict) else error
            raise ProviderError(
                f"{PRICE_SOURCE_YAHOO} API error: {description}", symbol=symbol_param
            )
        return chart

    async def get_current_price(self, symbol: str) -> PriceQuote:
        """Fetch the latest price for one symbol."""
        symbol = normalize_symbol(symbol)
        chart = await self._get_chart(symbol, self.settings.quote_timeout_seconds)

        results = chart.get("result")
        if not isinstance(results, list) or not results:
            raise ProviderError(f"No price data available for symbol: {symbol}", symbol=symbol)

        entry = results[0]
        if not isinstance(entry, dict):
            raise ProviderError(f"Malformed price data for symbol: {symbol}", symbol=symbol)

        price = _extract_price(entry.get("meta") or {})
        if price is None:
            raise ProviderError(f"No valid price found for symbol: {symbol}", symbol=symbol)

        logger.debug(f"Quote for {symbol}: {price}")
        return PriceQuote(
            symbol=symbol, price=price, timestamp=datetime.now(UTC), source=PRICE_SOURCE_YAHOO
        )

    async def get_batch_prices(self, symbols: list[str]) -> BatchPriceResult:
        """Fetch many prices in one request, falling back to one request per symbol."""
        requested = list(dict.fromkeys(normalize_symbol(s) for s in symbols))
        result = BatchPriceResult()
        if not requested:
            return result

        try:
            chart = await self._get_chart(",".join(requested), self.settings.batch_timeout_seconds)
            entries = chart.get("result")
            if not isinstance(entries, list) or not entries:
                raise ProviderError(f"No data returned from {PRICE_SOURCE_YAHOO}")
        except ProviderError as e:
            logger.warning(f"Batch request failed, falling back to individual requests: {e}")
            return await self._fetch_individually(requested, result)

        for entry in entries:
            meta = entry.get("meta") if isinstance(entry, dict) else None
            if not isinstance(meta, dict):
                logger.warning(f"Skipping malformed batch entry: {entry!r}")
                continue
            symbol = str(meta.get("symbol", "")).upper()
            price = _extract_price(meta)
            if symbol in requested and price is not None:
                result.record_price(symbol, price)

        for symbol in result.missing(requested):
            result.record_failure(symbol, "missing from batch response")
            logger.warning(f"No batch price for {symbol}")
        return result

    async def _fetch_individually(
        self, symbols: list[str], result: BatchPriceResult
    ) -> BatchPriceResult:
        for index, symbol in enumerate(symbols):
            if index and self.fallback_delay:
                await asyncio.sleep(self.fallback_delay)
            try:
                quote = await self.get_current_price(symbol)
            except ProviderError as e:
                logger.warning(f"Failed to fetch price for {symbol}: {e}")
                result.record_failure(symbol, str(e))
                continue
            result.record_price(symbol, quote.price)
        return result

    async def get_historical_prices(self, symbol: str, period: str = "1y") -> list[PriceQuote]:
        """Daily closes for the period, oldest first; null closes are skipped."""
        symbol = normalize_symbol(symbol)
        now = datetime.now(UTC)
        params = {
            "period1": int(_period_start(period, now).timestamp()),
            "period2": int(now.timestamp()),
            "interval": "1d",
        }
        chart = await self._get_chart(symbol, self.settings.batch_timeout_seconds, params=params)

        results = chart.get("result")
        if not isinstance(results, list) or not results:
            raise ProviderError(f"No historical data available for symbol: {symbol}", symbol=symbol)

        if not isinstance(results[0], dict):
            raise ProviderError(f"Malformed historical data for symbol: {symbol}", symbol=symbol)

        timestamps = results[0].get("timestamp") or []
        quotes = (results[0].get("indicators") or {}).get("quote") or [{}]
        closes = quotes[0].get("close") or []

        prices = [
            PriceQuote(
                symbol=symbol,
                price=float(close),
                timestamp=datetime.fromtimestamp(ts, tz=UTC),
                source=PRICE_SOURCE_YAHOO,
            )
            for ts, close in zip(timestamps, closes, strict=False)
            if close is not None
        ]
        return sorted(prices, key=lambda quote: quote.timestamp)

    async def validate_symbol(self, symbol: str) -> bool:
        """True if a current price can be fetched for symbol."""
        try:
            await self.get_current_price(symbol)
        except ProviderError:
            return False
        return True

    async def search_symbols(self, query: str) -> list[dict[str, str]]:
        """Search listed equities by name or ticker."""
        client = await self._get_client()
        params = {"q": query, "quotesCount": 10, "newsCount": 0}
        try:
            response = await client.get(
                self.settings.search_url, params=params, timeout=self.settings.quote_timeout_seconds
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise ProviderError(f"Network error searching for symbols: {e}") from e
        except ValueError as e:
            raise ProviderError("Invalid search response") from e

        return [
            {
                "symbol": quote["symbol"],
                "name": quote.get("shortname") or quote.get("longname") or quote["symbol"],
            }
            for quote in data.get("quotes") or []
            if quote.get("typeDisp") == "Equity" and quote.get("exchDisp") and quote.get("symbol")
        ]
