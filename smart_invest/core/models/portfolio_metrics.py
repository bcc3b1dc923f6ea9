"""
Portfolio valuation and performance metrics.

This module turns holdings plus a symbol -> price map into aggregate
performance figures, following the Single Responsibility Principle.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from smart_invest.core.types.financial import ZERO, calculate_percentage_return

if TYPE_CHECKING:
    from .portfolio import Portfolio


@dataclass(frozen=True)
class PerformanceMetrics:
    """Point-in-time performance of a portfolio.

    ``realized_gains`` is always 0: profit from completed sales is not
    tracked. ``unpriced_symbols`` lists holdings that were valued at their
    average cost because no current price was available.
    """

    total_value: float
    total_returns: float
    percentage_returns: float
    unrealized_gains: float
    realized_gains: float
    timestamp: datetime
    unpriced_symbols: tuple[str, ...] = ()


class PortfolioValuation:
    """Valuation engine for a single portfolio.

    Not a pure calculator: each valuation pass refreshes every holding's
    ``current_price`` with the price it used.
    """

    def __init__(self, portfolio: "Portfolio") -> None:
        """Initialize with the portfolio to value.

        Args:
            portfolio: The portfolio whose holdings are valued
        """
        self.portfolio = portfolio

    def _metrics(
        self, total_value: float, unrealized_gains: float, unpriced: tuple[str, ...] = ()
    ) -> PerformanceMetrics:
        total_returns = total_value - self.portfolio.initial_capital
        return PerformanceMetrics(
            total_value=total_value,
            total_returns=total_returns,
            percentage_returns=calculate_percentage_return(
                total_returns, self.portfolio.initial_capital
            ),
            unrealized_gains=unrealized_gains,
            realized_gains=ZERO,
            timestamp=datetime.now(UTC),
            unpriced_symbols=unpriced,
        )

    def cash_only_metrics(self) -> PerformanceMetrics:
        """Metrics from cash alone; used when the portfolio holds nothing."""
        return self._metrics(self.portfolio.current_cash, ZERO)

    def calculate_total_value(self, current_prices: Mapping[str, float]) -> PerformanceMetrics:
        """Value every holding and aggregate.

        A symbol absent from ``current_prices`` is valued at its average cost,
        so it contributes nothing to unrealized gains.

        Args:
            current_prices: Latest known price per symbol

        Returns:
            Aggregated performance metrics
        """
        total_value = self.portfolio.current_cash
        unrealized_gains = ZERO
        unpriced: list[str] = []

        for symbol, holding in self.portfolio.holdings.items():
            price = current_prices.get(symbol)
            if price is None:
                unpriced.append(symbol)
                price = holding.average_cost

            total_value += holding.market_value(price)
            unrealized_gains += holding.unrealized_gain(price)

            holding.current_price = price

        return self._metrics(total_value, unrealized_gains, tuple(unpriced))
