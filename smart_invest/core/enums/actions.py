"""
Transaction and recommendation action enumerations.

Values are upper-case so persisted files read "BUY"/"SELL"/"HOLD".
"""

from enum import StrEnum


class TransactionType(StrEnum):
    """
    Side of an executed transaction.
    """

    BUY = "BUY"
    SELL = "SELL"

    @property
    def is_buy(self) -> bool:
        """Check if transaction debits cash."""
        return self == self.BUY


class RecommendationAction(StrEnum):
    """
    Action proposed by a research-generated recommendation.
    """

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"

    @property
    def is_tradable(self) -> bool:
        """Check if the action maps to a ledger operation."""
        return self in [self.BUY, self.SELL]

    def transaction_type(self) -> TransactionType | None:
        """Get the transaction type produced by executing this action."""
        if self == self.BUY:
            return TransactionType.BUY
        elif self == self.SELL:
            return TransactionType.SELL
        return None  # HOLD never trades

    @classmethod
    def from_string(cls, value: str) -> "RecommendationAction":
        """
        Convert string to RecommendationAction, case-insensitive.

        Raises:
            ValueError: If action is not supported
        """
        value_upper = value.strip().upper()
        for action in cls:
            if action.value == value_upper:
                return action
        raise ValueError(
            f"Unsupported action: {value}. "
            f"Supported actions: {', '.join([a.value for a in cls])}"
        )
