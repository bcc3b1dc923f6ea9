"""
Holding domain model: one portfolio's position in one ticker symbol.
"""

from dataclasses import dataclass
from datetime import datetime

from smart_invest.core.exceptions.portfolio import InsufficientSharesError, ValidationError
from smart_invest.core.types.financial import (
    ZERO,
    calculate_notional_value,
    weighted_average_cost,
)
from smart_invest.core.utils.validation import validate_symbol


@dataclass
class Holding:
    """Shares held in a symbol and their weighted-average cost basis.

    ``current_price`` is the last price seen by a valuation pass. It is a cache,
    not an authoritative quote, and is overwritten on every valuation.
    """

    symbol: str
    quantity: int
    average_cost: float
    last_updated: datetime
    current_price: float | None = None

    def __post_init__(self) -> None:
        """Validate and normalize holding data after initialization."""
        self.symbol = validate_symbol(self.symbol)

        if not isinstance(self.quantity, int) or isinstance(self.quantity, bool):
            raise ValidationError(f"Quantity must be an integer, got {self.quantity!r}")
        if self.quantity <= 0:
            raise ValidationError(f"Quantity must be positive, got {self.quantity}")
        if self.average_cost <= ZERO:
            raise ValidationError(f"Average cost must be positive, got {self.average_cost}")

    def cost_basis(self) -> float:
        """Total amount paid for the shares still held."""
        return calculate_notional_value(self.quantity, self.average_cost)

    def market_value(self, price: float) -> float:
        """Value of the holding at the given price."""
        return calculate_notional_value(self.quantity, price)

    def unrealized_gain(self, price: float) -> float:
        """Paper profit or loss at the given price."""
        return self.market_value(price) - self.cost_basis()

    def add_shares(self, quantity: int, price: float, timestamp: datetime) -> None:
        """Buy more shares and re-average the cost basis."""
        self.average_cost = weighted_average_cost(
            self.quantity, self.average_cost, quantity, price
        )
        self.quantity += quantity
        self.last_updated = timestamp

    def remove_shares(self, quantity: int, timestamp: datetime) -> None:
        """Sell part of the holding. Average cost is unchanged by a sale.

        Raises:
            InsufficientSharesError: If quantity exceeds shares held
            ValidationError: If the sale would empty the holding (callers
                remove the holding instead)
        """
        if quantity > self.quantity:
            raise InsufficientSharesError(self.symbol, quantity, self.quantity)
        if quantity == self.quantity:
            raise ValidationError(
                f"Selling all {self.quantity} shares of {self.symbol} closes the holding"
            )
        self.quantity -= quantity
        self.last_updated = timestamp
