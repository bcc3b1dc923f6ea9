"""
Portfolio ledger: cash plus a set of holdings for one named portfolio.

The ledger enforces its invariants on every mutation:

- cash equals initial capital minus buy costs plus sell proceeds
- at most one holding per symbol, and no zero-quantity holdings
- a rejected buy or sell leaves cash and holdings untouched
"""

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime

from smart_invest.core.exceptions.portfolio import (
    HoldingNotFoundError,
    InsufficientFundsError,
    InsufficientSharesError,
    ValidationError,
)
from smart_invest.core.types.financial import ZERO, calculate_notional_value
from smart_invest.core.utils.decorators import validate_trade_inputs
from smart_invest.core.utils.validation import validate_non_empty, validate_positive

from .criteria import InvestmentCriteria
from .holding import Holding
from .portfolio_metrics import PerformanceMetrics, PortfolioValuation


@dataclass
class Portfolio:
    """Main portfolio ledger.

    Holds the portfolio state and exposes the buy/sell ledger operations;
    valuation is delegated to PortfolioValuation.
    """

    id: str
    name: str
    initial_capital: float
    current_cash: float
    created_at: datetime
    criteria: list[InvestmentCriteria] = field(default_factory=list)
    holdings: dict[str, Holding] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate portfolio state after initialization."""
        if self.initial_capital < ZERO:
            raise ValidationError(
                f"Initial capital must be non-negative, got {self.initial_capital}"
            )
        if self.current_cash < ZERO:
            raise ValidationError(f"Cash must be non-negative, got {self.current_cash}")
        for symbol, holding in self.holdings.items():
            if symbol != holding.symbol:
                raise ValidationError(f"Holding keyed as {symbol} is for {holding.symbol}")

    @classmethod
    def create(cls, name: str, initial_capital: float) -> "Portfolio":
        """Factory method for a new portfolio funded with initial_capital.

        Raises:
            ValidationError: If name is blank or capital is not positive
        """
        name = validate_non_empty(name, "name")
        initial_capital = float(validate_positive(initial_capital, "initial_capital"))
        return cls(
            id=str(uuid.uuid4()),
            name=name,
            initial_capital=initial_capital,
            current_cash=initial_capital,
            created_at=datetime.now(UTC),
        )

    def get_holding(self, symbol: str) -> Holding | None:
        """Holding for symbol, or None if not held."""
        return self.holdings.get(symbol.strip().upper())

    def cost_basis(self) -> float:
        """Total cost basis of everything currently held."""
        return sum((holding.cost_basis() for holding in self.holdings.values()), ZERO)

    def active_criteria(self) -> list[InvestmentCriteria]:
        """Criteria currently switched on, in insertion order."""
        return [criteria for criteria in self.criteria if criteria.active]

    def add_criteria(self, description: str, weight: float = 1) -> InvestmentCriteria:
        """Append a new active criterion."""
        criteria = InvestmentCriteria.create(description, weight)
        self.criteria.append(criteria)
        return criteria

    @validate_trade_inputs
    def add_holding(self, symbol: str, quantity: int, price: float) -> Holding:
        """Buy quantity shares of symbol at price.

        The funds check runs before any state changes, so a rejected buy
        leaves the ledger exactly as it was.

        Raises:
            InsufficientFundsError: If the purchase costs more than current cash
        """
        total_cost = calculate_notional_value(quantity, price)
        if total_cost > self.current_cash:
            raise InsufficientFundsError(
                required=total_cost,
                available=self.current_cash,
                operation=f"buying {quantity} {symbol} at {price}",
            )

        now = datetime.now(UTC)
        holding = self.holdings.get(symbol)
        if holding is None:
            holding = Holding(symbol=symbol, quantity=quantity, average_cost=price, last_updated=now)
            self.holdings[symbol] = holding
        else:
            holding.add_shares(quantity, price, now)

        self.current_cash -= total_cost
        return holding

    @validate_trade_inputs
    def remove_holding(self, symbol: str, quantity: int, price: float) -> float:
        """Sell quantity shares of symbol at price and return the proceeds.

        Selling the full quantity removes the holding; a partial sale keeps
        the average cost of the remaining shares.

        Raises:
            HoldingNotFoundError: If symbol is not held
            InsufficientSharesError: If quantity exceeds shares held
        """
        holding = self.holdings.get(symbol)
        if holding is None:
            raise HoldingNotFoundError(symbol)
        if quantity > holding.quantity:
            raise InsufficientSharesError(symbol, quantity, holding.quantity)

        proceeds = calculate_notional_value(quantity, price)
        if quantity == holding.quantity:
            del self.holdings[symbol]
        else:
            holding.remove_shares(quantity, datetime.now(UTC))

        self.current_cash += proceeds
        return proceeds

    def calculate_total_value(self, current_prices: Mapping[str, float]) -> PerformanceMetrics:
        """Calculate performance against current prices (refreshes holding prices)."""
        return PortfolioValuation(self).calculate_total_value(current_prices)

    def cash_only_metrics(self) -> PerformanceMetrics:
        """Performance when no prices are needed (no holdings)."""
        return PortfolioValuation(self).cash_only_metrics()
