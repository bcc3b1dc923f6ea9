"""
Ledger arithmetic helpers and numeric constants.
"""

from .financial import (
    HUNDRED,
    PERCENTAGE_DECIMALS,
    PRICE_DECIMALS,
    ZERO,
    calculate_notional_value,
    calculate_percentage_return,
    weighted_average_cost,
)

__all__ = [
    "calculate_notional_value",
    "calculate_percentage_return",
    "weighted_average_cost",
    "HUNDRED",
    "PERCENTAGE_DECIMALS",
    "PRICE_DECIMALS",
    "ZERO",
]
