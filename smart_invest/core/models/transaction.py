"""
Transaction domain model.

Transactions are immutable once created; the log they live in is append-only.
"""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime

from smart_invest.core.enums import TransactionType
from smart_invest.core.exceptions.portfolio import ValidationError
from smart_invest.core.types.financial import calculate_notional_value


@dataclass(frozen=True)
class Transaction:
    """Represents an executed buy or sell."""

    id: str
    portfolio_id: str
    symbol: str
    type: TransactionType
    quantity: int
    price: float
    timestamp: datetime
    reasoning: str

    def __post_init__(self) -> None:
        """Validate transaction data after initialization."""
        if not isinstance(self.type, TransactionType):
            try:
                object.__setattr__(self, "type", TransactionType(str(self.type).upper()))
            except ValueError as e:
                raise ValidationError(f"Invalid transaction type: {self.type}") from e
        if self.quantity <= 0:
            raise ValidationError(f"Quantity must be positive, got {self.quantity}")
        if self.price <= 0:
            raise ValidationError(f"Price must be positive, got {self.price}")

    @classmethod
    def record(
        cls,
        portfolio_id: str,
        symbol: str,
        type: TransactionType,
        quantity: int,
        price: float,
        reasoning: str,
        timestamp: datetime | None = None,
    ) -> "Transaction":
        """Factory method for a new transaction stamped now."""
        return cls(
            id=str(uuid.uuid4()),
            portfolio_id=portfolio_id,
            symbol=symbol,
            type=type,
            quantity=quantity,
            price=price,
            timestamp=timestamp if timestamp is not None else datetime.now(UTC),
            reasoning=reasoning,
        )

    def notional_value(self) -> float:
        """Cash moved by this transaction."""
        return calculate_notional_value(self.quantity, self.price)

    def cash_flow(self) -> float:
        """Signed effect on cash: negative for buys, positive for sells."""
        if self.type.is_buy:
            return -self.notional_value()
        return self.notional_value()
