"""
Market data value types returned by price providers.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class PriceQuote:
    """A single price observation for one symbol."""

    symbol: str
    price: float
    timestamp: datetime
    source: str


@dataclass
class BatchPriceResult:
    """Per-symbol outcome of a best-effort batch price lookup.

    Every requested symbol ends up in exactly one of ``prices`` or
    ``failures`` so that a missing price is visible to the caller instead of
    silently absent.
    """

    prices: dict[str, float] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)

    def record_price(self, symbol: str, price: float) -> None:
        self.prices[symbol] = price
        self.failures.pop(symbol, None)

    def record_failure(self, symbol: str, reason: str) -> None:
        if symbol not in self.prices:
            self.failures[symbol] = reason

    @property
    def complete(self) -> bool:
        """True when no symbol failed."""
        return not self.failures

    def as_mapping(self) -> dict[str, float]:
        """Symbol to price mapping of the successful lookups."""
        return dict(self.prices)

    def missing(self, symbols: list[str]) -> list[str]:
        """Symbols from the request that have no price."""
        return [symbol for symbol in symbols if symbol not in self.prices]
